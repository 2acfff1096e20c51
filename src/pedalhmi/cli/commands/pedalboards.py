"""Pedalboard and bank listing commands."""

import click

from pedalhmi.lv2 import PluginMetadataCache
from pedalhmi.pedalboards import PedalboardStateLoader, list_pedalboards, load_banks

from .common import load_config


@click.group(name="pedalboards")
def pedalboards_group():
    """Inspect saved pedalboards."""
    pass


@pedalboards_group.command(name="list")
@click.pass_context
def pedalboards_list(ctx):
    """List pedalboards in host order (the index used by pedalboard-load)."""
    config = load_config(ctx)
    pedalboards = list_pedalboards(config.pedalboards_dir)

    if not pedalboards:
        click.echo(f"No pedalboards found in {config.pedalboards_dir}")
        return
    for index, pedalboard in enumerate(pedalboards):
        click.echo(f"[{index}] {pedalboard.name}")
        click.echo(f"    {pedalboard.path}")


@pedalboards_group.command(name="show")
@click.pass_context
@click.argument("index", type=int)
def pedalboards_show(ctx, index: int):
    """Show the pedals of a pedalboard with their current values."""
    config = load_config(ctx)
    pedalboards = list_pedalboards(config.pedalboards_dir)
    if not 0 <= index < len(pedalboards):
        click.echo(f"No pedalboard at index {index} ({len(pedalboards)} found)", err=True)
        ctx.exit(1)
    pedalboard = pedalboards[index]

    with PluginMetadataCache.from_paths(config.cache_path, config.lv2_paths) as cache:
        pedals = PedalboardStateLoader(cache).get_pedals(pedalboard)

    click.echo(f"{pedalboard.name} ({len(pedals)} pedals)\n")
    for pedal in pedals:
        state = "" if pedal.enabled else " [bypassed]"
        brand = f" by {pedal.brand}" if pedal.brand else ""
        click.echo(f"#{pedal.instance_number} {pedal.label}{brand}{state}")
        click.echo(f"    instance: {pedal.instance}")
        if not pedal.has_metadata:
            click.echo(f"    plugin: {pedal.plugin_uri} (not installed)")
            for symbol, value in sorted(pedal.values.items()):
                click.echo(f"    {symbol} = {value:g}")
            continue
        for param, value in pedal.controls:
            label = param.label_for(value)
            shown = f"{value:g} ({label})" if label else f"{value:g}"
            click.echo(f"    {param.name} = {shown}")
        for file_param in pedal.file_parameters:
            click.echo(f"    {file_param.label} = {file_param.path or '-'}")


@click.group(name="banks")
def banks_group():
    """Inspect pedalboard banks."""
    pass


@banks_group.command(name="list")
@click.pass_context
def banks_list(ctx):
    """List banks with the id used by pedalboard-load."""
    config = load_config(ctx)
    for bank in load_banks(config.banks_path):
        if bank.is_all_pedalboards:
            click.echo(f"[{bank.id}] {bank.title}")
        else:
            click.echo(f"[{bank.id}] {bank.title} ({len(bank.pedalboard_bundles)} pedalboards)")
