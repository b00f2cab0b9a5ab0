"""
Ad batch commands for AdLauncher CLI

Group creative files by name, inspect template ads, and launch a batch of
paused ads into a freshly cloned ad set.
"""

import asyncio
import base64
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from pydantic import ValidationError

from ..core.config import Config
from ..core.observability import setup_logfire, setup_logging
from ..services.exceptions import AdLauncherError, BatchFatalError
from ..services.filename_classifier import AdGroupPool, RawFile, classify_files
from ..services.models import BatchCreateRequest, BatchCreateResult, TemplateCopy


def _resolve_token(access_token: Optional[str]) -> str:
    if access_token:
        return access_token
    try:
        Config.validate()
    except ValueError as e:
        click.echo(f"❌ {e}. Pass --access-token or set it in the environment", err=True)
        sys.exit(1)
    return Config.META_GRAPH_API_TOKEN


def _read_files(paths: Tuple[str, ...]) -> List[RawFile]:
    files = []
    for path in paths:
        file_path = Path(path)
        with open(file_path, 'rb') as f:
            payload = base64.b64encode(f.read()).decode('utf-8')
        files.append(RawFile(filename=file_path.name, payload=payload))
    return files


def _display_groups(pool: AdGroupPool) -> None:
    click.echo(f"\n📂 {len(pool)} ad group(s)\n")
    for group in pool:
        click.echo(f"  {group.ad_name}")
        for asset in group.media:
            click.echo(f"    - {asset.filename} [{asset.kind.value}, {asset.aspect_ratio.value}]")


def _display_results(result: BatchCreateResult) -> None:
    click.echo("\n" + "=" * 60)
    click.echo(f"📦 Ad set: {result.ad_set_name} ({result.ad_set_id})")
    click.echo("=" * 60)
    for ad in result.results:
        if ad.success:
            click.echo(f"  ✅ {ad.ad_name}: {ad.ad_id}")
        else:
            click.echo(f"  ❌ {ad.ad_name}: {ad.error}")
    click.echo(f"\n{result.success_count} created, {result.failure_count} failed")


@click.command('classify')
@click.argument('files', nargs=-1, required=True)
def classify_command(files: Tuple[str, ...]):
    """
    Show how files would be grouped into ads.

    Files are grouped by name with any trailing aspect-ratio token
    (9x16, 4x5, 1x1, 16x9) removed. Only names are used; nothing is read.

    Examples:
        adlauncher classify summer_9x16.mp4 summer_4x5.jpg winter.png
    """
    pool = classify_files(Path(f).name for f in files)
    _display_groups(pool)


@click.command('template')
@click.argument('ad_id')
@click.option('--access-token', default=None, help='Graph API token (default: META_GRAPH_API_TOKEN)')
def template_command(ad_id: str, access_token: Optional[str]):
    """
    Show what a template ad resolves to: account, page, ad set and copy.

    Examples:
        adlauncher template 120210000000000000
    """
    setup_logging()
    token = _resolve_token(access_token)

    try:
        template, copy = asyncio.run(_resolve_template(token, ad_id))
    except AdLauncherError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"\n🧩 Template ad {template.source_ad_id}")
    click.echo(f"  Account:   {template.ad_account_id}")
    click.echo(f"  Page:      {template.page_id}")
    click.echo(f"  Ad set:    {template.source_ad_set_id}")
    click.echo(f"  Campaign:  {template.ad_set_config.campaign_id}")
    click.echo(f"  Goal:      {template.ad_set_config.optimization_goal or '-'}")
    click.echo(f"\n  Primary text: {copy.primary_text or '-'}")
    click.echo(f"  Headline:     {copy.headline or '-'}")
    click.echo(f"  URL:          {copy.url or '-'}")


async def _resolve_template(token: str, ad_id: str):
    from ..pipelines.ad_batch.dependencies import AdBatchDependencies

    deps = AdBatchDependencies.create(access_token=token)
    try:
        template = await deps.templates.resolve(ad_id)
        return template, deps.templates.extract_copy(template.creative_spec)
    finally:
        await deps.aclose()


@click.command('create')
@click.option('--request', 'request_path', type=click.Path(exists=True), default=None,
              help='JSON BatchCreateRequest file')
@click.option('--template-ad-id', default=None, help='Template ad id')
@click.option('--ad-set-name', default=None, help='Name for the new ad set')
@click.option('--scheduled-time', default=None, help='ISO-8601 start time; marks ads as scheduled')
@click.option('--primary-text', default=None, help='Override the template primary text')
@click.option('--headline', default=None, help='Override the template headline')
@click.option('--url', default=None, help='Override the template destination URL')
@click.option('--access-token', default=None, help='Graph API token (default: META_GRAPH_API_TOKEN)')
@click.option('--output-json', type=click.Path(), help='Export results to JSON file')
@click.argument('files', nargs=-1, type=click.Path(exists=True, dir_okay=False))
def create_command(
    request_path: Optional[str],
    template_ad_id: Optional[str],
    ad_set_name: Optional[str],
    scheduled_time: Optional[str],
    primary_text: Optional[str],
    headline: Optional[str],
    url: Optional[str],
    access_token: Optional[str],
    output_json: Optional[str],
    files: Tuple[str, ...],
):
    """
    Create a new paused ad set with one ad per file group.

    Either pass a full request as JSON, or a template ad, an ad set name
    and the creative files. Copy defaults to the template ad's copy.

    Examples:
        adlauncher create --request batch.json
        adlauncher create --template-ad-id 1202... --ad-set-name "Oct test" a_9x16.mp4 a_4x5.jpg b.png
    """
    setup_logging()
    setup_logfire()

    if request_path:
        try:
            with open(request_path) as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError('expected a JSON object')
            if not (data.get('accessToken') or data.get('access_token')):
                data['accessToken'] = _resolve_token(access_token)
            elif access_token:
                data['accessToken'] = access_token
                data.pop('access_token', None)
            request = BatchCreateRequest.model_validate(data)
        except (ValueError, ValidationError) as e:
            click.echo(f"❌ Invalid request file: {e}", err=True)
            sys.exit(1)
        token = request.access_token
    elif template_ad_id and ad_set_name and files:
        request = None
        token = _resolve_token(access_token)
    else:
        click.echo("❌ Pass --request, or --template-ad-id, --ad-set-name and FILES", err=True)
        sys.exit(1)

    overrides = {'primary_text': primary_text, 'headline': headline, 'url': url}

    try:
        result = asyncio.run(_execute_batch(
            token=token,
            request=request,
            template_ad_id=template_ad_id,
            ad_set_name=ad_set_name,
            scheduled_time=scheduled_time,
            files=files,
            overrides={k: v for k, v in overrides.items() if v is not None},
        ))
    except BatchFatalError as e:
        click.echo(f"❌ Batch aborted: {e}", err=True)
        sys.exit(1)

    _display_results(result)

    if output_json:
        with open(output_json, 'w') as f:
            json.dump(result.model_dump(by_alias=True), f, indent=2)
        click.echo(f"\n📄 Results exported to: {output_json}")

    if result.failure_count:
        sys.exit(2)


async def _execute_batch(
    token: str,
    request: Optional[BatchCreateRequest],
    template_ad_id: Optional[str],
    ad_set_name: Optional[str],
    scheduled_time: Optional[str],
    files: Tuple[str, ...],
    overrides: dict,
) -> BatchCreateResult:
    """Build the request from local files when needed, then run the batch."""
    from ..pipelines.ad_batch import AdBatchDependencies, run_ad_batch

    deps = AdBatchDependencies.create(access_token=request.access_token if request else token)
    try:
        if request is None:
            template = await deps.templates.resolve(template_ad_id)
            copy = deps.templates.extract_copy(template.creative_spec)
            defaults = TemplateCopy(**{**copy.model_dump(), **overrides})

            pool = classify_files(_read_files(files), defaults=defaults)
            _display_groups(pool)

            request = BatchCreateRequest(
                access_token=token,
                template_ad_id=template_ad_id,
                new_ad_set_name=ad_set_name,
                scheduled_time=scheduled_time,
                ads=[group.to_input() for group in pool],
            )

        click.echo(f"\n🚀 Creating {len(request.ads)} ad(s) in new ad set '{request.new_ad_set_name}'...")
        return await run_ad_batch(request, deps=deps)
    finally:
        await deps.aclose()
