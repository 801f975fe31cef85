"""文字列変換のヘルパー関数"""
import re

import emoji


def trim_bracket_contents(text: str) -> str:
    """丸括弧とその中身を取り除く ("Client(:office:)" -> "Client")"""
    return re.sub(r"\(.+\)", "", text, count=1)


def trim_bracket_time(text: str) -> str:
    """末尾の時刻指定 "(10:00-11:30)" を取り除く"""
    return re.sub(r" *\([0-9]{1,2}:[0-9]{2}-?([0-9]{1,2}:[0-9]{2})?\)", "", text, count=1)


def trim_bracket_date(text: str) -> str:
    """日付指定 "[x2020/1/2]" や "[x1/2]" を取り除く"""
    return re.sub(r" *\[x(\d{4}/\d{1,2}/\d{1,2}|\d{1,2}/\d{1,2})\]", "", text, count=1)


def trim_prefix_emoji(text: str) -> str:
    """先頭の絵文字ショートネーム ":memo: " を取り除く"""
    return re.sub(r"^ *:[^:]+: *", "", text, count=1)


def to_emoji_string(text: str) -> str:
    """ショートネーム (:smile:) を絵文字に置き換える"""
    return emoji.emojize(text, language="alias")
