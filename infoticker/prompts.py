"""
Instructions sent to the AI source. Every prompt asks for bare JSON.
"""
import json
from typing import Sequence

NEWS_PROMPT = (
    "List the 10 most important breaking news stories in Vietnam and the "
    "world from the past hour. Write each as a one-sentence summary in "
    "Vietnamese. Reply only with a JSON array of strings, for example "
    '["Summary 1", "Summary 2"].'
)

FINANCE_PROMPT = (
    "Provide the latest financial data. Reply only with one JSON object "
    'with the keys "vietnamStocks", "worldStocks", "forex", "goldPrices" '
    'and "fuelPrices".\n'
    '- "vietnamStocks": array of {"index", "value", "change", '
    '"percentChange"} for VN-INDEX, HNX-INDEX, UPCOM.\n'
    '- "worldStocks": same shape for DOW JONES, S&P 500, NIKKEI 225.\n'
    '- "forex": array of {"code", "buy", "sell"} in VND for USD, EUR, JPY.\n'
    '- "goldPrices": object with "domestic" (array of {"name", "buy", '
    '"sell"} in VND per tael for SJC and 9999) and "world" (array of '
    '{"name", "price"} for spot gold in USD per ounce).\n'
    '- "fuelPrices": object with "domestic" (array of {"name", "price"} in '
    'VND per litre for RON95-V, E5 RON92, diesel) and "world" (array of '
    '{"name", "price"} in USD per barrel for BRENT, WTI).'
)


def weather_prompt(cities: Sequence[str]) -> str:
    return (
        "Provide today's weather for these Vietnamese cities: "
        f"{json.dumps(list(cities), ensure_ascii=False)}. Reply only with "
        'a JSON array of objects {"city", "tempMin", "tempMax", "humidity", '
        '"rainChance"}; temperatures in Celsius, humidity and rain chance '
        "in percent."
    )


def topic_prompt(topic: str, count: int) -> str:
    return (
        f'Reply only with a JSON object with the key "title" (a very short '
        f'Vietnamese headline for "{topic}") and the key "summaries" (an '
        f"array of {count} one-sentence Vietnamese news summaries about it)."
    )
