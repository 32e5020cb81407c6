# llm_connector_toolkit/examples/people_search_example.py
"""
Runs a small prospecting batch with the built-in Apollo search and one custom tool.

Requires OPENAI_API_KEY and APOLLO_KEY in the environment (or a .env file).
"""
import json
import logging
from typing import Any, Dict

from llm_connector_toolkit import run_sync
from llm_connector_toolkit.tools import BaseTool, ToolFactory
from llm_connector_toolkit.tools.models import ToolExecutionResult

logging.basicConfig(level=logging.INFO)
module_logger = logging.getLogger(__name__)


class AccountNotesTool(BaseTool):
    """Looks up internal account notes for a company domain."""

    NAME: str = "getAccountNotes"
    DESCRIPTION: str = "Returns the sales team's notes about a company, by its domain."
    PARAMETERS: Dict[str, Any] = {
        "type": "object",
        "properties": {
            "domain": {"type": "string", "description": "Company domain, e.g. 'google.com'."},
            "crmToken": {"type": "string", "description": "CRM access token."},
        },
        "required": ["domain", "crmToken"],
    }
    # Never shown to the model; filled from the CRM_TOKEN setting.
    CREDENTIALS = {"crmToken": "CRM_TOKEN"}

    NOTES = {"google.com": "Renewal due in Q3. Champion: Head of Sales EMEA."}

    def execute(self, domain: str, crmToken: str) -> ToolExecutionResult:  # noqa: N803
        module_logger.info(f"[AccountNotesTool] Looking up notes for '{domain}'")
        notes = self.NOTES.get(domain, "No notes on file.")
        return ToolExecutionResult(
            content=json.dumps({"domain": domain, "notes": notes}),
            payload=notes,
        )


def main() -> None:
    factory = ToolFactory()
    factory.register_builtins()
    factory.register_tool_class(AccountNotesTool)

    result = run_sync(
        "gpt-4o-mini",
        [
            "Find three sales managers at google.com located in Berlin.",
            "What do our account notes say about that company?",
        ],
        properties={"temperature": 0.2},
        settings={"CRM_TOKEN": "demo-crm-token"},
        tool_factory=factory,
    )
    print(json.dumps(result.to_wire(), indent=2))


if __name__ == "__main__":
    main()
