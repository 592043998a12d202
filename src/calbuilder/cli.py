"""CLI interface for the calendar page builder."""

import json
import logging
from pathlib import Path

import click

from calbuilder.builder import ENGINES, REFERENCE_ENGINE, get_image_builder, get_metrics_provider
from calbuilder.config import BuilderSettings, Config, load_config
from calbuilder.design import DesignText
from calbuilder.errors import CalendarBuilderError
from calbuilder.layout import Align, Row, Rows, Text, Valign

RUN_SEPARATOR = "|"


@click.group()
@click.version_option(package_name="calbuilder")
@click.option("-v", "--verbose", is_flag=True, help="Log every draw call.")
def main(verbose: bool) -> None:
    """Lay out captions and render photo calendar pages."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("rows", nargs=-1, required=True)
@click.option(
    "--engine",
    type=click.Choice([REFERENCE_ENGINE, *ENGINES]),
    default=REFERENCE_ENGINE,
    show_default=True,
    help="Font metrics to measure with. 'reference' needs no font file.",
)
@click.option("--font", type=str, default="reference", help="Font file path (required for gdimage/imagick).")
@click.option("--font-size", type=int, default=20, show_default=True, help="Font size in pixels.")
@click.option("--angle", type=int, default=0, show_default=True, help="Angle in degrees, counter-clockwise.")
@click.option("-x", "position_x", type=int, default=0, show_default=True, help="Reference x.")
@click.option("-y", "position_y", type=int, default=0, show_default=True, help="Reference y.")
@click.option(
    "--align",
    type=click.Choice([member.name.lower() for member in Align]),
    default="left",
    show_default=True,
)
@click.option(
    "--valign",
    type=click.Choice([member.name.lower() for member in Valign]),
    default="bottom",
    show_default=True,
)
@click.option("--distance", type=int, default=0, show_default=True, help="Gap between rows in pixels.")
def measure(
    rows: tuple[str, ...],
    engine: str,
    font: str,
    font_size: int,
    angle: int,
    position_x: int,
    position_y: int,
    align: str,
    valign: str,
    distance: int,
) -> None:
    """
    Print the layout of ROWS as JSON.

    Each argument is one row; '|' splits a row into runs:

        calbuilder measure "Text |Text Text Text" "Second row"
    """
    metrics = get_metrics_provider(engine)

    try:
        block = Rows(
            [
                Row([Text(run, font, font_size, angle, metrics=metrics) for run in row.split(RUN_SEPARATOR)])
                for row in rows
            ],
            distance=distance,
        )
        result = block.get_metrics(position_x, position_y, Align[align.upper()], Valign[valign.upper()])
    except CalendarBuilderError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


@main.command("render-text")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Output image path (.jpg or .png).",
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to calbuilder.toml with [builder] and [design] tables.",
)
@click.option("--engine", type=click.Choice(ENGINES), help="Engine override.")
@click.option("--font", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Font override.")
@click.option("--text", "caption", type=str, help="Caption; '<br>' starts a new line.")
@click.option("--author", type=str, help="Author line.")
def render_text(
    source: Path,
    output: Path,
    config: Path | None,
    engine: str | None,
    font: Path | None,
    caption: str | None,
    author: str | None,
) -> None:
    """Render a quote page with SOURCE as the source photo."""
    try:
        cfg = load_config(config) if config else Config()

        updates: dict[str, object] = {"output_format": output.suffix.lstrip(".").lower() or "jpeg"}
        if font:
            updates["font_path"] = font
        settings = BuilderSettings.model_validate({**cfg.builder.model_dump(), **updates})

        design_config = dict(cfg.design)
        if caption is not None:
            design_config["text"] = caption
        if author is not None:
            design_config["author"] = author

        builder = get_image_builder(DesignText(), settings, design_config, engine=engine)
        result = builder.build(source)

        output.write_bytes(result.data)
        click.echo(f"✓ {output} ({result.width}x{result.height}, {result.mime_type}, {result.size_byte} bytes)")

    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    except CalendarBuilderError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
