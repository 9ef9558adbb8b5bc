"""
Tempgram E2E Scenarios Package.

This package contains end-to-end scenarios driving a live Tempgram
environment with Playwright, then checking the notification emails the
scenario triggers in the participants' IMAP mailboxes.

Scenarios:
    - test_01_chat_with_registered_user: chat between registered users of
      the same enterprise, including notification emails and unread state

Data Sets:
    - data_sets/: JSON data sets and the files scenarios upload

Running Scenarios:
    # Run against an environment
    TEMPGRAM_BASE_URL=https://qa.tempgram.example pytest tests/e2e/

    # Run in headed mode with slow motion
    TEMPGRAM_BROWSER_HEADLESS=false TEMPGRAM_BROWSER_SLOW_MO=250 pytest tests/e2e/

Environment Variables:
    TEMPGRAM_BASE_URL: Web application URL (scenarios are skipped without it)
    TEMPGRAM_USER_PASSWORD: Password of the scenario users
    TEMPGRAM_IMAP_HOST: Mail server holding the participants' mailboxes
    TEMPGRAM_IMAP_PASSWORD: Password of the participants' mailboxes
    TEMPGRAM_IMAP_ACCOUNTS: Mailboxes purged before a scenario
    TEMPGRAM_LOAD_SCENARIOS: Ask the backend to load scenario data (default: false)
"""
