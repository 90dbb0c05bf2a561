"""CLI interface for the hexworld core."""

import json
import logging
from pathlib import Path
from typing import Optional

import click

from hexworld import config


def _write_json(payload: str, output: Optional[str]) -> None:
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(payload)
        click.echo(f"Saved to {output_path}")
    else:
        click.echo(payload)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Hexworld grid, map generation and rule tools"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL,
        format=config.LOG_FORMAT,
    )


@cli.command()
@click.option("--seed", default=None, type=int, help="World seed")
@click.option("--chunk-size", default=config.DEFAULT_CHUNK_SIZE, help="Hexes per chunk side")
@click.option("--size", default=1, help="Chunks per world side")
@click.option("--output", default=None, help="Output JSON file (stdout if omitted)")
def world(seed: Optional[int], chunk_size: int, size: int, output: Optional[str]):
    """Generate a square of world chunks as JSON."""
    from hexworld.world_map import ChunkPosition, WorldMap

    world_map = WorldMap(chunk_size=chunk_size, seed=seed)
    records = []
    for x in range(size):
        for y in range(size):
            chunk = world_map.get_or_generate_chunk(ChunkPosition(x, y))
            records.append(chunk.to_record().model_dump(mode="json"))

    _write_json(json.dumps({"seed": world_map.seed, "chunks": records}, indent=2), output)


@cli.command()
@click.argument("name")
@click.option("--seed", default=None, type=int, help="Generator seed")
@click.option("--output", default=None, help="Output JSON file (stdout if omitted)")
def area(name: str, seed: Optional[int], output: Optional[str]):
    """Generate a map from a named area template (town, forest)."""
    from hexworld.area_generator import MapGenerator

    generator = MapGenerator(seed=seed)
    chunk = generator.generate_map(name)
    if chunk is None:
        raise click.BadParameter(
            f"unknown template {name!r}; choose from {', '.join(generator.template_names())}",
            param_hint="NAME",
        )

    _write_json(chunk.to_record().model_dump_json(indent=2), output)


@cli.command()
@click.option("--dir", "templates_dir", default=None, help="Rule template directory")
def templates(templates_dir: Optional[str]):
    """List loadable rule templates."""
    from hexworld.templates import TemplateLoader

    loader = TemplateLoader(Path(templates_dir) if templates_dir else None)
    loaded = loader.load_all()
    if not loaded:
        click.echo(f"No templates found in {loader.templates_dir}")
        return

    for name, template in loaded.items():
        click.echo(f"{name}: {len(template.rules)} rules - {template.description}")


@cli.command()
@click.argument("template_name")
@click.option("--seed", default=42, help="World seed")
@click.option("--chunk-size", default=config.DEFAULT_CHUNK_SIZE, help="Hexes per chunk side")
@click.option("--dir", "templates_dir", default=None, help="Rule template directory")
def apply(template_name: str, seed: int, chunk_size: int, templates_dir: Optional[str]):
    """Apply a rule template to every cell of chunk (0, 0)."""
    from hexworld.template_engine import TemplateEngine
    from hexworld.templates import TemplateLoader
    from hexworld.world_map import ChunkPosition, WorldMap

    engine = TemplateEngine()
    TemplateLoader(Path(templates_dir) if templates_dir else None).load_into(engine)
    if engine.get_template(template_name) is None:
        raise click.BadParameter(
            f"unknown template {template_name!r}", param_hint="TEMPLATE_NAME"
        )

    chunk = WorldMap(chunk_size=chunk_size, seed=seed).get_or_generate_chunk(ChunkPosition(0, 0))
    positions = [pos for pos, _ in chunk.grid.iter_cells()]
    matched = sum(
        1 for pos in positions
        if engine.apply_template(template_name, chunk.grid, pos)
    )

    click.echo(f"Chunk biome: {chunk.biome.value}")
    click.echo(f"Rules matched on {matched} of {len(positions)} cells")


@cli.command()
@click.option("--seed", default=42, help="World seed")
@click.option("--chunk-size", default=config.DEFAULT_CHUNK_SIZE, help="Hexes per chunk side")
@click.option("--start", nargs=2, type=int, default=(0, 0), help="Start Q R")
@click.option("--goal", nargs=2, type=int, default=(5, 5), help="Goal Q R")
@click.option("--max-nodes", default=None, type=int, help="Search node budget")
def path(seed: int, chunk_size: int, start: tuple, goal: tuple, max_nodes: Optional[int]):
    """Find a path across chunk (0, 0)."""
    from hexworld.hex_coords import HexPosition
    from hexworld.world_map import ChunkPosition, WorldMap

    chunk = WorldMap(chunk_size=chunk_size, seed=seed).get_or_generate_chunk(ChunkPosition(0, 0))
    grid = chunk.grid
    route = grid.find_path(HexPosition.new_2d(*start), HexPosition.new_2d(*goal), max_nodes=max_nodes)

    click.echo(f"Chunk biome: {chunk.biome.value}")
    if route is None:
        click.echo("No path found")
        return

    click.echo(f"Path length: {len(route)} hexes")
    click.echo(f"Path cost: {grid.path_cost(route)}")
    for pos in route:
        cell = grid.get_cell(pos)
        click.echo(f"  ({pos.q}, {pos.r}, {pos.z}) {cell.terrain.value}")


if __name__ == "__main__":
    cli()
