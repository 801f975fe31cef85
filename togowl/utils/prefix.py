"""通知メッセージに付与するプレフィックス"""
import re
from typing import Dict

EVENT_PREFIXES: Dict[str, str] = {
    "start": ":arrow_forward:",
    "pause": ":pause_button:",
    "interrupt": ":warning:",
    "force_stop": ":black_square_for_stop:",
    "done": ":white_check_mark:",
    "delete": ":wastebasket:",
}

_BRACKET_EMOJI = re.compile(r"\((:[^:()]+:)\)")


def get_event_prefix(event: str) -> str:
    return EVENT_PREFIXES.get(event, "")


def _bracket_emoji(name: str, default: str) -> str:
    # "Client(:office:)" のように括弧内に書かれた絵文字を優先
    match = _BRACKET_EMOJI.search(name)
    return match.group(1) if match else default


def get_client_prefix(client: str, default: str) -> str:
    return _bracket_emoji(client, default)


def get_project_prefix(project: str, default: str) -> str:
    return _bracket_emoji(project, default)
