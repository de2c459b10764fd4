"""Project raw search hits into the rows the list views return."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from typing import Any, Mapping, Optional

from pitchpro.constants import (
    GROUPS_PAGE_SIZE,
    INCOME_TRANSACTION_TYPE,
    MAX_PAGE_SIZE,
    PERMANENT_SESSIONS_INDEX,
    SESSIONS_INDEX,
    SESSIONS_PAGE_SIZE,
    TRANSACTIONS_INDEX,
    TRANSACTIONS_PAGE_SIZE,
    WITHDRAWAL_TRANSACTION_TYPE,
)
from pitchpro.core.dates import from_epoch_ms
from pitchpro.utils import (
    format_currency,
    format_phone_number,
    format_session_type,
    format_time,
    format_time_range,
)

from .client import SearchClient
from .filters import groups_filter, sessions_filter, transactions_filter

logger = logging.getLogger(__name__)

TRANSACTION_TYPE_LABELS = {
    INCOME_TRANSACTION_TYPE: "Session Fee",
    WITHDRAWAL_TRANSACTION_TYPE: "Withdrawal",
}


def organization_id_from_ref(ref: Optional[str]) -> str:
    """``organizations/abc`` -> ``abc``; anything else is returned as is."""
    if not ref:
        return ""
    parts = ref.split("/")
    return parts[1] if len(parts) > 1 else ref


def _iso(value: Optional[datetime.datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _timestamp_ms(value: Any) -> int:
    """Epoch milliseconds from a number or a serialized ``{_seconds}``."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value)
    if isinstance(value, dict) and value.get("_seconds"):
        return int(value["_seconds"]) * 1000
    return 0


def project_session(
    hit: Mapping[str, Any], tz: datetime.tzinfo | None = None
) -> dict[str, Any]:
    session_time = hit.get("session_time") or {}
    start_ms = session_time.get("startTime") or 0
    end_ms = session_time.get("endTime") or 0
    time_label = ""
    if start_ms and end_ms:
        time_label = format_time_range(
            from_epoch_ms(start_ms, tz), from_epoch_ms(end_ms, tz)
        )

    date_ms = hit.get("session_date") or 0
    owner = hit.get("session_owner") or {}
    pitch = hit.get("pitch") or {}
    return {
        "id": hit.get("objectID"),
        "sessionNo": hit.get("session_no") or "",
        "bookedBy": owner.get("name") or "Unknown",
        "ownerDisplayName": owner.get("displayName") or owner.get("name") or "Unknown",
        "pitch": pitch.get("name") or "Unknown Venue",
        "pitchName": pitch.get("pitchName") or "Unknown Pitch",
        "organizationId": organization_id_from_ref(pitch.get("organization_ref")),
        "date": _iso(from_epoch_ms(date_ms, tz)),
        "dateTimestamp": date_ms,
        "time": time_label,
        "type": hit.get("session_type") or "Session",
        "typeLabel": format_session_type(hit.get("session_type") or "Session"),
        "amount": hit.get("pitch_fee"),
        "collectedAmount": hit.get("collected_amount") or 0,
        "pitchFee": hit.get("pitch_fee") or 0,
        "status": hit.get("status") or "Pending",
        "groupName": hit.get("group_name"),
    }


def _group_admin(members: Iterable[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Return the user details of the group's Admin member, if any."""
    for member in members:
        if member.get("role") == "Admin":
            return member.get("userDetails") or {}
    return {}


def group_admin_name(members: Iterable[Mapping[str, Any]]) -> str:
    details = _group_admin(members)
    return details.get("displayName") or details.get("name") or "Unknown"


def project_group(
    hit: Mapping[str, Any], tz: datetime.tzinfo | None = None
) -> dict[str, Any]:
    session_time = hit.get("session_time") or {}
    start_ms = session_time.get("startTime") or 0
    end_ms = session_time.get("endTime") or 0
    members = hit.get("members") or []
    pitch_fee = hit.get("pitch_fee") or 0
    total_price = hit.get("total_price_per_contribution")
    return {
        "id": hit.get("objectID"),
        "name": hit.get("name") or "Unknown Group",
        "groupId": hit.get("group_id") or "",
        "organizationId": organization_id_from_ref(hit.get("organization_ref")),
        "pitchRef": hit.get("pitch_ref") or "",
        "days": session_time.get("days") or [],
        "startTime": format_time(from_epoch_ms(start_ms, tz)) if start_ms else "",
        "endTime": format_time(from_epoch_ms(end_ms, tz)) if end_ms else "",
        "status": hit.get("status") or "Pending",
        "paymentType": hit.get("payment_type") or "Monthly",
        "pricePerMember": hit.get("price_per_member") or 0,
        "pitchFee": pitch_fee,
        "totalPrice": pitch_fee if total_price is None else total_price,
        "percentageDiscount": hit.get("percentage_discount") or 0,
        "members": members,
        "membersCount": len(members),
        "adminName": group_admin_name(members),
        "adminPhone": format_phone_number(_group_admin(members).get("phoneNumber")),
        "startDate": _iso(from_epoch_ms(hit.get("start_date") or 0, tz)),
        "createdTime": _iso(from_epoch_ms(hit.get("created_time") or 0, tz)),
    }


def transaction_type_label(transaction_type: str) -> str:
    return TRANSACTION_TYPE_LABELS.get(transaction_type, transaction_type)


def is_income(transaction_type: str) -> bool:
    return transaction_type == INCOME_TRANSACTION_TYPE


def project_transaction(
    hit: Mapping[str, Any], tz: datetime.tzinfo | None = None
) -> dict[str, Any]:
    """A transaction row; the date falls back to ``created_at``."""
    date_ms = _timestamp_ms(hit.get("transaction_date")) or _timestamp_ms(
        hit.get("created_at")
    )
    transaction_type = hit.get("type") or "Unknown"
    return {
        "id": hit.get("objectID"),
        "type": transaction_type,
        "typeLabel": transaction_type_label(transaction_type),
        "isIncome": is_income(transaction_type),
        "amount": hit.get("amount") or 0,
        "transactionDate": _iso(from_epoch_ms(date_ms, tz)) if date_ms else None,
        "dateTimestamp": date_ms,
        "status": hit.get("status") or "Completed",
        "reference": hit.get("reference") or hit.get("transaction_ref") or "",
        "description": hit.get("description") or hit.get("narration") or "",
        "sessionRef": hit.get("session_ref") or hit.get("sessionRef"),
        "userRef": hit.get("user_ref") or hit.get("userRef"),
        "userName": hit.get("user_name")
        or hit.get("userName")
        or hit.get("owner_name")
        or "",
        "pitchName": hit.get("pitch_name") or hit.get("pitchName") or "",
    }


def transaction_totals(transactions: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Income and withdrawal totals of one page of transactions."""
    income = 0.0
    withdrawals = 0.0
    for transaction in transactions:
        if transaction["type"] == INCOME_TRANSACTION_TYPE:
            income += transaction["amount"]
        elif transaction["type"] == WITHDRAWAL_TRANSACTION_TYPE:
            withdrawals += transaction["amount"]
    return {
        "income": income,
        "withdrawals": withdrawals,
        "net": income - withdrawals,
        "income_formatted": format_currency(income),
        "withdrawals_formatted": format_currency(withdrawals),
    }


def page_size(requested: Optional[int], default: int) -> int:
    if not requested or requested < 1:
        return default
    return min(requested, MAX_PAGE_SIZE)


def _page(result: Mapping[str, Any], rows: list[dict[str, Any]], page: int) -> dict:
    return {
        "hits": rows,
        "nbHits": result["nbHits"],
        "nbPages": result["nbPages"],
        "page": page,
    }


def search_sessions(
    client: SearchClient,
    organization_id: str,
    query: str = "",
    start_date: Optional[datetime.datetime] = None,
    end_date: Optional[datetime.datetime] = None,
    page: int = 0,
    hits_per_page: Optional[int] = None,
    tz: datetime.tzinfo | None = None,
    index_name: str = SESSIONS_INDEX,
) -> dict[str, Any]:
    result = client.search(
        index_name,
        query,
        sessions_filter(organization_id, start_date, end_date, tz),
        page,
        page_size(hits_per_page, SESSIONS_PAGE_SIZE),
    )
    logger.info(f"Sessions search: {len(result['hits'])} of {result['nbHits']}")
    return _page(result, [project_session(hit, tz) for hit in result["hits"]], page)


def search_groups(
    client: SearchClient,
    organization_id: str,
    query: str = "",
    status: Optional[str] = None,
    days: Optional[Iterable[str]] = None,
    page: int = 0,
    hits_per_page: Optional[int] = None,
    tz: datetime.tzinfo | None = None,
    index_name: str = PERMANENT_SESSIONS_INDEX,
) -> dict[str, Any]:
    result = client.search(
        index_name,
        query,
        groups_filter(organization_id, status, days),
        page,
        page_size(hits_per_page, GROUPS_PAGE_SIZE),
    )
    logger.info(f"Groups search: {len(result['hits'])} of {result['nbHits']}")
    return _page(result, [project_group(hit, tz) for hit in result["hits"]], page)


def search_transactions(
    client: SearchClient,
    organization_id: str,
    query: str = "",
    start_date: Optional[datetime.datetime] = None,
    end_date: Optional[datetime.datetime] = None,
    page: int = 0,
    hits_per_page: Optional[int] = None,
    tz: datetime.tzinfo | None = None,
    index_name: str = TRANSACTIONS_INDEX,
) -> dict[str, Any]:
    result = client.search(
        index_name,
        query,
        transactions_filter(organization_id, start_date, end_date, tz),
        page,
        page_size(hits_per_page, TRANSACTIONS_PAGE_SIZE),
    )
    logger.info(f"Transactions search: {len(result['hits'])} of {result['nbHits']}")
    rows = [project_transaction(hit, tz) for hit in result["hits"]]
    payload = _page(result, rows, page)
    payload["totals"] = transaction_totals(rows)
    return payload
