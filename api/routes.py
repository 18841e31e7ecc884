from typing import Optional

import requests
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from pydantic import BaseModel

from app.errors import (
    DuplicateSubscriptionError,
    NotificationDeliveryError,
    SubscriptionError,
    SubscriptionNotFoundError,
    TransientFetchError,
)
from app.messaging import build_test_notification
from app.service import GoalNotifier
from app.subscriptions import Subscription
from app.teams import NHL_TEAMS, TEAM_BY_ABBREV

router = APIRouter(prefix="/api")


class SubscribeBody(BaseModel):
    topic: Optional[str] = None
    team_abbrev: Optional[str] = None


def get_goal_notifier(request: Request) -> GoalNotifier:
    return request.app.state.goal_notifier


def _with_team(sub: Subscription) -> dict:
    team = TEAM_BY_ABBREV.get(sub.team_abbrev)
    return {
        "id": sub.id,
        "topic": sub.topic,
        "team_abbrev": sub.team_abbrev,
        "created_at": sub.created_at,
        "team": team.to_dict() if team else None,
    }


@router.get("/teams")
def teams():
    return {"teams": [t.to_dict() for t in NHL_TEAMS]}


@router.get("/subscriptions")
def subscriptions(topic: Optional[str] = None, gn: GoalNotifier = Depends(get_goal_notifier)):
    return {"subscriptions": [_with_team(s) for s in gn.store.list(topic)]}


@router.post("/subscribe", status_code=201)
def subscribe(
    body: SubscribeBody,
    background_tasks: BackgroundTasks,
    gn: GoalNotifier = Depends(get_goal_notifier),
):
    """
    Persist a subscription, then catch up on today's game after responding
    so goals already scored are not pushed to the new subscriber.
    """
    if not body.topic or not body.team_abbrev:
        raise HTTPException(status_code=400, detail="topic and team_abbrev required")

    try:
        sub = gn.store.add(body.topic, body.team_abbrev)
    except DuplicateSubscriptionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SubscriptionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    background_tasks.add_task(gn.notify_new_subscription, sub.team_abbrev)
    return {"subscription": _with_team(sub)}


@router.delete("/subscribe/{sub_id}")
def unsubscribe(sub_id: str, gn: GoalNotifier = Depends(get_goal_notifier)):
    try:
        gn.store.remove(sub_id)
    except SubscriptionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"ok": True}


@router.post("/test")
def test_notification(body: SubscribeBody, gn: GoalNotifier = Depends(get_goal_notifier)):
    if not body.topic or not body.topic.strip():
        raise HTTPException(status_code=400, detail="topic required")

    team = TEAM_BY_ABBREV.get(body.team_abbrev)
    try:
        gn.notifier.send(body.topic.strip(), build_test_notification(team))
    except NotificationDeliveryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True}


@router.get("/health")
def health(gn: GoalNotifier = Depends(get_goal_notifier)):
    return {
        "status": "ok",
        "subscriptions": len(gn.store),
        "active_teams": sorted(gn.store.distinct_subscribed_teams()),
        "tracked_games": len(gn.tracker.tracked_game_ids()),
    }


@router.get("/debug")
def debug(gn: GoalNotifier = Depends(get_goal_notifier)):
    """
    Outbound connectivity check for the NHL API and ntfy, plus engine state.
    """
    out = {}
    try:
        out["nhl_games_today"] = gn.source.check()
        out["nhl_api"] = "OK"
    except TransientFetchError as e:
        out["nhl_api"] = f"FAIL: {e}"

    try:
        out["ntfy_health"] = gn.notifier.health()
    except requests.RequestException as e:
        out["ntfy_health"] = f"FAIL: {e}"

    out["subscriptions"] = [{"topic": s.topic, "team": s.team_abbrev} for s in gn.store.list()]
    out["tracked_games"] = gn.tracker.tracked_game_ids()
    return out
