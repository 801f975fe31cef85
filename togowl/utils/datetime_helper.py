"""経過時間フォーマットのヘルパー関数"""
from datetime import date, datetime


def parse_entry_time(text: str) -> int:
    """
    Togglのタイマー表示を秒数に変換

    Args:
        text: "1:02:03" / "02:03" / "3" 形式の文字列

    Returns:
        int: 秒数（解釈できない場合は0）
    """
    seconds = 0
    for part in text.strip().split(":"):
        if not part.isdigit():
            return 0
        seconds = seconds * 60 + int(part)
    return seconds


def format_seconds_ja(seconds: int) -> str:
    """
    秒数を日本語の経過時間に変換

    Returns:
        str: "1時間2分3秒" 形式の文字列（0の上位単位は省略）
    """
    hours, rest = divmod(max(seconds, 0), 3600)
    minutes, secs = divmod(rest, 60)

    if hours:
        return f"{hours}時間{minutes}分{secs}秒"
    if minutes:
        return f"{minutes}分{secs}秒"
    return f"{secs}秒"


def to_japanese(entry_time: str) -> str:
    """Togglのタイマー表示 ("0:12:34") を "12分34秒" に変換"""
    return format_seconds_ja(parse_entry_time(entry_time))


def today_str(today: date | None = None) -> str:
    """ローカル日付を "YYYY-MM-DD" 形式で取得"""
    return (today or datetime.now().date()).isoformat()
