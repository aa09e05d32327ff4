"""Command line entry point for fret_tuner."""

import random
import sys
from typing import Optional

import click

from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import FrameResult
from ..note_utils import STANDARD_TUNING, get_note_name
from ..core.config import ConfigManager
from ..core.errors import AcquisitionError
from ..core.factory import ComponentFactory

logger = get_logger(__name__)

STRING_CHOICES = click.IntRange(0, len(STANDARD_TUNING) - 1)


def format_result(result: FrameResult) -> str:
    """One status line for a frame result."""
    if result.stabilized_frequency is None:
        return f"vol {result.volume:4.2f} | -- no pitch --"

    target = result.target_label or "--"
    detected = (
        STANDARD_TUNING[result.detected_reference_index].label
        if result.detected_reference_index is not None
        else "--"
    )
    name = get_note_name(result.stabilized_frequency)
    cents = result.note.cents_off if result.note is not None else 0
    line = (
        f"vol {result.volume:4.2f} | {result.stabilized_frequency:8.2f}Hz "
        f"{name:<4} ({cents:+3d}c) | {result.mode.value:<6} "
        f"target {target:<3} detected {detected:<3} | "
        f"needle {result.smoothed_cents_offset:+6.2f}c"
    )
    if result.off_target:
        line += "  !! playing a different string"
    return line


def _build_factory(config_dir: Optional[str]) -> ComponentFactory:
    return ComponentFactory(ConfigManager(config_dir))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the JSON configuration (default: ~/.config/fret_tuner)",
)
@click.pass_context
def cli(ctx, debug, config_dir):
    """Guitar tuner: pitch detection against standard tuning."""
    setup_logging(level="DEBUG" if debug else "WARNING")
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


@cli.command()
def devices():
    """List audio input devices and the sample rates they accept."""
    from ..audio.audio_input import list_input_devices

    for device in list_input_devices():
        rates = ", ".join(str(r) for r in device["supported_rates"]) or "none"
        click.echo(
            f"{device['id']}: {device['name']} "
            f"(inputs: {device['channels']}, default {device['default_samplerate']:.0f}Hz, "
            f"supported: {rates})"
        )


@cli.command()
@click.option("--device", type=int, default=None, help="Audio input device ID")
@click.option("--string", "string_index", type=STRING_CHOICES, default=None,
              help="Lock onto a string (0 = low E) instead of auto-detecting")
@click.option("--duration", "-t", type=float, default=None, help="Stop after this many seconds")
@click.option("--no-tone", is_flag=True, help="Do not play the reference tone on lock")
@click.pass_context
def listen(ctx, device, string_index, duration, no_tone):
    """Tune live from an input device."""
    factory = _build_factory(ctx.obj["config_dir"])
    audio_input = factory.create_live_input(device_id=device)
    tone_player = None if no_tone else factory.create_tone_player()
    session = factory.create_session(audio_input=audio_input, tone_player=tone_player)
    driver = factory.create_driver(session)

    last_line = None

    def show(result: FrameResult) -> None:
        nonlocal last_line
        line = format_result(result)
        if line != last_line:
            click.echo(line)
            last_line = line

    try:
        if string_index is None:
            session.start()
        else:
            session.select_target(string_index)
    except AcquisitionError as e:
        raise click.ClickException(str(e)) from e

    click.echo("Listening... press Ctrl+C to stop")
    driver.run(duration=duration, on_result=show)


@cli.command()
@click.argument("wav_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--string", "string_index", type=STRING_CHOICES, default=None,
              help="Measure against one string instead of auto-detecting")
@click.option("--hop", type=int, default=None, help="Samples to advance per frame")
@click.option("--seed", type=int, default=0, help="Seed for the silence eviction")
@click.pass_context
def analyze(ctx, wav_file, string_index, hop, seed):
    """Run the tuner over a recorded file, one line per detected frame."""
    factory = _build_factory(ctx.obj["config_dir"])
    audio_input = factory.create_file_input(wav_file, hop_size=hop)
    session = factory.create_session(audio_input=audio_input, rng=random.Random(seed))
    driver = factory.create_driver(session, tick_interval=0.0)

    try:
        if string_index is None:
            session.start()
        else:
            session.select_target(string_index)
    except AcquisitionError as e:
        raise click.ClickException(str(e)) from e

    frames = 0
    detected = 0
    last = None
    try:
        for result in driver.ticks():
            frames += 1
            if result.pitch_detected:
                detected += 1
                last = result
                click.echo(f"{frames:5d} {format_result(result)}")
    finally:
        session.stop()

    click.echo(f"Processed {frames} frames, pitch in {detected}")
    if last is not None:
        click.echo(
            f"Final: {last.stabilized_frequency:.2f}Hz {last.note} "
            f"target {last.target_label} needle {last.smoothed_cents_offset:+.2f}c"
        )


def main() -> int:
    """Main entry point for the CLI."""
    return cli(obj={})


if __name__ == "__main__":
    sys.exit(main())
