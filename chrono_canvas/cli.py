"""
ChronoCanvas Demo - plays a sample canvas through the timeline engine.

Entry point:
    chrono-canvas-demo   - Evaluate a sample canvas via playback or zine scroll
"""

import asyncio
import json
import logging
from typing import List

import click

from .config import TimelineConfig
from .logging_config import configure_logging
from .timeline import (
    CanvasElement,
    ImageElement,
    Keyframe,
    PlaybackClock,
    Point,
    PropertySnapshot,
    ScrollTimeMapper,
    Size,
    StickerElement,
    TextElement,
    TimelineData,
    TimelineState,
    evaluate_all,
)


def build_demo_canvas() -> List[CanvasElement]:
    """A small canvas: a title fading in, a photo sliding across, a sticker popping up."""
    title = TextElement(
        id="title",
        content="Bangkok, Day One",
        position=Point(40, 40),
        size=Size(400, 60),
        timeline=TimelineData(
            entry_point=0.0,
            exit_point=None,
            keyframes=[
                Keyframe(0.0, PropertySnapshot(opacity=0.0), easing="emphasized_decelerate"),
                Keyframe(2.0, PropertySnapshot(opacity=1.0)),
            ]
        )
    )
    photo = ImageElement(
        id="photo",
        src="images/temple.jpg",
        alt="Temple",
        position=Point(0, 150),
        size=Size(320, 240),
        timeline=TimelineData(
            entry_point=1.0,
            exit_point=8.0,
            persist=False,
            keyframes=[
                Keyframe(1.0, PropertySnapshot(position=Point(0, 150), rotation=-5.0), easing="standard"),
                Keyframe(6.0, PropertySnapshot(position=Point(480, 150), rotation=5.0)),
            ]
        )
    )
    sticker = StickerElement(
        id="sticker",
        emoji="🐘",
        position=Point(500, 60),
        size=Size(64, 64),
        timeline=TimelineData(
            entry_point=3.0,
            exit_point=5.0,
            persist=True,
            keyframes=[
                Keyframe(3.0, PropertySnapshot(size=Size(0, 0)), easing="ease_out_bounce"),
                Keyframe(4.0, PropertySnapshot(size=Size(64, 64))),
            ]
        )
    )
    return [title, photo, sticker]


def _format_frame(position: float, elements: List[CanvasElement], as_json: bool) -> str:
    results = evaluate_all(elements, position)
    if as_json:
        return json.dumps({
            "position": round(position, 3),
            "elements": {eid: result.to_dict() for eid, result in results.items()}
        })

    parts = []
    for eid, result in results.items():
        if not result.visible:
            parts.append(f"{eid}=hidden")
            continue
        props = result.properties
        parts.append(
            f"{eid}=({props.position.x:.0f},{props.position.y:.0f} "
            f"rot={props.rotation:.1f} a={props.opacity:.2f})"
        )
    return f"t={position:6.2f}s  " + "  ".join(parts)


async def _run_playback(state: TimelineState, elements: List[CanvasElement],
                        seconds: float, speed: float, print_interval: float, as_json: bool):
    clock = PlaybackClock(state)
    clock.set_playback_speed(speed)
    clock.start(asyncio.get_running_loop())
    try:
        elapsed = 0.0
        while elapsed < seconds:
            await asyncio.sleep(print_interval)
            elapsed += print_interval
            click.echo(_format_frame(state.current_position, elements, as_json))
    finally:
        clock.close()


def _run_zine(state: TimelineState, elements: List[CanvasElement],
              step_pixels: float, as_json: bool):
    mapper = ScrollTimeMapper(state)
    mapper.activate()
    scroll = 0.0
    while scroll <= mapper.extent:
        mapper.on_scroll(scroll)
        click.echo(_format_frame(state.current_position, elements, as_json))
        scroll += step_pixels


@click.command()
@click.option(
    "--mode",
    "-m",
    default="play",
    type=click.Choice(["play", "zine"]),
    help="Drive the timeline with the playback clock or a simulated scroll",
)
@click.option("--seconds", "-s", default=10.0, help="Wall time to play for (play mode)")
@click.option("--speed", default=1.0, help="Playback speed multiplier")
@click.option("--interval", default=0.5, help="Seconds between printed frames (play mode)")
@click.option("--step", default=100.0, help="Scroll pixels per printed frame (zine mode)")
@click.option("--min-duration", default=None, type=float, help="Override the minimum timeline length")
@click.option("--json", "as_json", is_flag=True, help="Print frames as JSON lines")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(mode, seconds, speed, interval, step, min_duration, as_json, verbose):
    """Play a sample canvas through the ChronoCanvas timeline engine."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    config = TimelineConfig.from_env()
    if min_duration is not None:
        config.min_duration = min_duration

    elements = build_demo_canvas()
    state = TimelineState(config)
    state.recompute_duration(elements)
    click.echo(f"Timeline duration: {state.duration:.1f}s ({len(elements)} elements)")

    try:
        if mode == "play":
            asyncio.run(_run_playback(state, elements, seconds, speed, interval, as_json))
        else:
            _run_zine(state, elements, step, as_json)
    except KeyboardInterrupt:
        click.echo("\nInterrupted")


if __name__ == "__main__":
    main()
