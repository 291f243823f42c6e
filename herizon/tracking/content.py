"""Static dashboard content: daily tips and period myths."""

from __future__ import annotations

from dataclasses import dataclass

DAILY_TIPS: tuple[str, ...] = (
    "Stay hydrated! Aim for 8 glasses of water a day.",
    "Practice deep breathing exercises for stress relief.",
    "Incorporate more leafy greens into your diet for iron.",
    "Try a warm compress for cramp relief.",
    "Get moving with light exercise like yoga or walking.",
)


@dataclass(frozen=True)
class Myth:
    myth: str
    fact: str


MYTHS: tuple[Myth, ...] = (
    Myth(
        "You can't get pregnant during your period.",
        "While it's less likely, you can still get pregnant during your period, "
        "especially if you have a shorter menstrual cycle.",
    ),
    Myth(
        "PMS is all in your head.",
        "PMS is a real medical condition caused by hormonal changes during the menstrual cycle.",
    ),
    Myth(
        "Irregular periods always indicate a serious problem.",
        "While irregular periods can sometimes signal health issues, they can also be "
        "caused by stress, diet, or exercise changes.",
    ),
    Myth(
        "You shouldn't exercise during your period.",
        "Exercise can actually help alleviate period symptoms like cramps and mood swings.",
    ),
    Myth(
        "Using tampons can cause you to lose your virginity.",
        "Using tampons does not affect virginity, which is about sexual intercourse, "
        "not physical changes to the body.",
    ),
)


def daily_tips(limit: int = 3) -> list[str]:
    return list(DAILY_TIPS[:limit])
