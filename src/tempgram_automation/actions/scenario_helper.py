"""
Scenario test data loading.

Each scenario file has a matching data scenario on the backend, named
after the file. Environments that are seeded in advance run with
``load_scenarios`` off and skip this step entirely.
"""

import logging
from pathlib import Path

from ..exceptions import ScenarioLoadError
from .login_api import LoginApiActions

logger = logging.getLogger(__name__)


def scenario_name_for(scenario_file: str | Path) -> str:
    """Scenario name of a test file: its file name without the extension."""
    return Path(scenario_file).stem


class ScenarioHelper:
    """Asks the backend to load a scenario's test data when it is missing."""

    @staticmethod
    async def load_scenario_if_needed(
        login_api_actions: LoginApiActions,
        scenario_file: str | Path,
    ) -> bool:
        """
        Load the scenario of a test file unless the backend already has it.

        Args:
            login_api_actions: Actions whose API session performs the requests.
            scenario_file: Path or name of the scenario test file.

        Returns:
            True if a load was requested, False if it was not needed.

        Raises:
            ScenarioLoadError: If the backend cannot report or load the scenario.
        """
        env_profile = login_api_actions.env_profile
        name = scenario_name_for(scenario_file)

        if not env_profile.load_scenarios:
            logger.debug("Scenario loading disabled, skipping %s", name)
            return False

        endpoint = f"{env_profile.scenario_endpoint.rstrip('/')}/{name}"
        status = await login_api_actions.request("GET", endpoint)
        if status.get("error") and status.get("status") != 404:
            raise ScenarioLoadError(
                f"Cannot read status of scenario '{name}'",
                {"status": status.get("status"), "message": status.get("message")},
            )

        if status.get("loaded"):
            logger.info("Scenario %s already loaded", name)
            return False

        logger.info("Loading scenario %s", name)
        result = await login_api_actions.request("POST", endpoint, {"name": name})
        if result.get("error"):
            raise ScenarioLoadError(
                f"Failed to load scenario '{name}'",
                {"status": result.get("status"), "message": result.get("message")},
            )
        return True
