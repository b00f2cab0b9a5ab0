"""
Account browsing commands for AdLauncher CLI
"""

import asyncio
import sys
from typing import Any, Dict, List, Optional

import click
import httpx

from ..core.config import Config
from ..services.exceptions import MetaApiError
from ..services.meta_graph_client import MetaGraphClient


def _run(token: Optional[str], method: str, *args) -> List[Dict[str, Any]]:
    async def call():
        async with MetaGraphClient(access_token=token) as graph:
            return await getattr(graph, method)(*args)

    try:
        return asyncio.run(call())
    except MetaApiError as e:
        click.echo(f"❌ {e.detail}", err=True)
        sys.exit(1)
    except httpx.HTTPError as e:
        click.echo(f"❌ Could not reach the Graph API: {type(e).__name__}: {e}", err=True)
        sys.exit(1)


def _echo_rows(rows: List[Dict[str, Any]], *columns: str) -> None:
    if not rows:
        click.echo("(none)")
        return
    for row in rows:
        click.echo("  ".join(str(row.get(c, "-")) for c in columns))


@click.group('accounts')
@click.option('--access-token', default=None, help='Graph API token (default: META_GRAPH_API_TOKEN)')
@click.pass_context
def accounts_group(ctx, access_token: Optional[str]):
    """Browse ad accounts, campaigns, ad sets and ads"""
    ctx.obj = access_token or Config.META_GRAPH_API_TOKEN


@accounts_group.command('list')
@click.pass_obj
def list_accounts(token: str):
    """List ad accounts visible to the token."""
    _echo_rows(_run(token, "list_ad_accounts"), "id", "name", "account_status")


@accounts_group.command('campaigns')
@click.option('--account-id', default=None, help='Ad account id (default: META_AD_ACCOUNT_ID, then first account)')
@click.pass_obj
def list_campaigns(token: str, account_id: Optional[str]):
    """List campaigns in an ad account."""
    account_id = account_id or Config.META_AD_ACCOUNT_ID or None
    _echo_rows(_run(token, "list_campaigns", account_id), "id", "name", "status", "objective")


@accounts_group.command('ad-sets')
@click.argument('campaign_id')
@click.pass_obj
def list_ad_sets(token: str, campaign_id: str):
    """List ad sets in a campaign."""
    _echo_rows(_run(token, "list_ad_sets", campaign_id), "id", "name", "status")


@accounts_group.command('ads')
@click.argument('ad_set_id')
@click.pass_obj
def list_ads(token: str, ad_set_id: str):
    """List ads in an ad set (candidates for --template-ad-id)."""
    _echo_rows(_run(token, "list_ads", ad_set_id), "id", "name", "status")
