"""
Newsletter subscription routes.
"""
from datetime import datetime
from html import escape

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from shutterconnect.api.middleware.error_handler import AppException
from shutterconnect.lib.db import get_db
from shutterconnect.services.newsletter_service import NewsletterService


router = APIRouter(prefix="/newsletter", tags=["newsletter"])


class SubscribeRequest(BaseModel):
    email: EmailStr
    source: str = Field("website", max_length=50)


class UnsubscribeRequest(BaseModel):
    email: EmailStr


class SubscriberResponse(BaseModel):
    email: str
    source: str
    is_active: bool
    subscribed_at: datetime

    model_config = {"from_attributes": True}


class SubscribeResponse(BaseModel):
    message: str
    subscriber: SubscriberResponse


class UnsubscribeResponse(BaseModel):
    message: str


UNSUBSCRIBE_PAGE = """<!DOCTYPE html>
<html>
  <head><meta charset="utf-8"><title>ShutterConnect newsletter</title></head>
  <body style="font-family: sans-serif; max-width: 480px; margin: 64px auto; text-align: center;">
    <h1>{heading}</h1>
    <p>{body}</p>
  </body>
</html>
"""


@router.post("/subscribe", response_model=SubscribeResponse, status_code=status.HTTP_201_CREATED)
async def subscribe(
    request: SubscribeRequest,
    db: Session = Depends(get_db),
) -> SubscribeResponse:
    """
    Subscribe an email address, or reactivate a lapsed subscription.

    Raises:
        400: Already subscribed
    """
    subscriber = await NewsletterService(db).subscribe(request.email, request.source)
    return SubscribeResponse(
        message="Successfully subscribed to our newsletter",
        subscriber=SubscriberResponse.model_validate(subscriber),
    )


@router.post("/unsubscribe", response_model=UnsubscribeResponse)
def unsubscribe(
    request: UnsubscribeRequest,
    db: Session = Depends(get_db),
) -> UnsubscribeResponse:
    """
    Raises:
        404: Email never subscribed
        400: Already unsubscribed
    """
    NewsletterService(db).unsubscribe(request.email)
    return UnsubscribeResponse(message="Successfully unsubscribed from our newsletter")


@router.get("/unsubscribe", response_class=HTMLResponse)
def unsubscribe_link(
    email: EmailStr = Query(...),
    db: Session = Depends(get_db),
) -> HTMLResponse:
    """Unsubscribe from the link in a newsletter email and show a confirmation page."""
    try:
        NewsletterService(db).unsubscribe(email)
    except AppException as e:
        page = UNSUBSCRIBE_PAGE.format(heading="Nothing to do", body=escape(e.message))
        return HTMLResponse(content=page, status_code=e.status_code)

    page = UNSUBSCRIBE_PAGE.format(
        heading="You have been unsubscribed",
        body=f"{escape(email)} will no longer receive the ShutterConnect newsletter.",
    )
    return HTMLResponse(content=page)
