"""
Flask CLI commands for moderation maintenance.

Usage:
    flask moderate-campaign <campaign_id>          # Score and print, nothing stored
    flask moderate-campaign <campaign_id> --save   # Also store result and apply decision
    flask rescore-pending                          # Dry run (count pending campaigns)
    flask rescore-pending --confirm                # Re-moderate every pending campaign
"""

from __future__ import annotations

import click
from flask import Flask
from flask.cli import with_appcontext


@click.command("moderate-campaign")
@click.argument("campaign_id")
@click.option("--save", is_flag=True, default=False,
              help="Store the result and apply the decision to the campaign.")
@with_appcontext
def moderate_campaign_command(campaign_id: str, save: bool) -> None:
    """Score one stored campaign and print the breakdown."""
    from horizon.services import campaigns, moderation_history
    from horizon.services.moderation import ModerationError, moderate_campaign

    campaign = campaigns.get_campaign(campaign_id)
    if not campaign:
        click.echo(f"Campaign {campaign_id} not found (or Supabase admin client not configured).")
        raise SystemExit(1)

    payload = campaigns.to_moderation_payload(campaign)
    try:
        result = moderate_campaign(payload)
    except ModerationError as e:
        click.echo(f"Moderation failed: {e}")
        raise SystemExit(2)

    scores = result["scores"]
    click.echo(f"Campaign: {campaign.get('title', '')} ({campaign_id})")
    click.echo(f"Decision: {result['decision']}  Overall: {scores['overall']}")
    for key in ("luxury", "inappropriate", "fraud", "needValidation", "trust"):
        click.echo(f"  {key:<15} {scores[key]:>3}")
    click.echo(f"Flags: {', '.join(result['flags']) or 'none'}")
    for rec in result["recommendations"]:
        click.echo(f"  - {rec}")

    if save:
        summary = moderation_history.record_moderation(payload, result)
        if summary["errors"]:
            click.echo(f"Saved with errors: {'; '.join(summary['errors'])}")
            raise SystemExit(1)
        click.echo(f"Saved. Campaign status: {summary['status']}")


@click.command("rescore-pending")
@click.option("--confirm", is_flag=True, default=False,
              help="Actually re-moderate. Without this flag, only counts campaigns (dry run).")
@with_appcontext
def rescore_pending_command(confirm: bool) -> None:
    """Re-moderate every campaign waiting in the review queue."""
    from horizon.services import campaigns

    queue, err = campaigns.list_review_queue(limit=500)
    if err:
        click.echo(f"Error: {err}")
        raise SystemExit(1)

    if not queue:
        click.echo("No campaigns are waiting for review.")
        return

    click.echo(f"Found {len(queue)} pending campaign(s).")

    if not confirm:
        click.echo("\nDry run, nothing re-scored. Use --confirm to re-moderate.")
        return

    results = campaigns.batch_moderate([c["id"] for c in queue])
    for i, r in enumerate(results, 1):
        if r["decision"] == "error":
            click.echo(f"  [{i}/{len(results)}] {r['campaignId']}: error ({r['error']})")
        else:
            click.echo(f"  [{i}/{len(results)}] {r['campaignId']}: {r['decision']} ({r['overall']})")

    errors = sum(1 for r in results if r["decision"] == "error")
    click.echo(f"\nDone. Re-scored: {len(results) - errors}, Failed: {errors}")


def register_commands(app: Flask) -> None:
    app.cli.add_command(moderate_campaign_command)
    app.cli.add_command(rescore_pending_command)
