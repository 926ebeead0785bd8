"""Event subscription filters in the consensus node's query language."""

import re
from enum import Enum
from typing import Optional, Union

from .exceptions import InvalidQuery, MissingParameter

NEW_BLOCK = "tm.event='NewBlock'"
TX = "tm.event='Tx'"

_TAG = r"[A-Za-z_][A-Za-z0-9_.\-]*"
_OPERAND = (
    r"(?:'[^']*'"
    r"|-?[0-9]+(?:\.[0-9]+)?"
    r"|DATE [0-9]{4}-[0-9]{2}-[0-9]{2}"
    r"|TIME [0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9:.]+(?:Z|[+\-][0-9]{2}:[0-9]{2}))"
)
_CONDITION = (
    rf"{_TAG}\s*(?:<=|>=|=|<|>)\s*{_OPERAND}"
    rf"|{_TAG}\s+CONTAINS\s+'[^']*'"
    rf"|{_TAG}\s+EXISTS"
)
_QUERY_RE = re.compile(rf"\s*(?:{_CONDITION})(?:\s+AND\s+(?:{_CONDITION}))*\s*")


class EventCategory(str, Enum):
    NEW_BLOCK = "newBlock"
    NEW_TRANSACTION = "newTransaction"
    TRANSFER_RECEIVED = "transferReceived"
    TRANSFER_SENT = "transferSent"
    DELEGATION_CREATED = "delegationCreated"
    DELEGATION_UPDATED = "delegationUpdated"
    UNDELEGATION_STARTED = "undelegationStarted"
    UNDELEGATION_COMPLETED = "undelegationCompleted"
    REDELEGATION_STARTED = "redelegationStarted"
    REWARDS_WITHDRAWN = "rewardsWithdrawn"
    PROPOSAL_CREATED = "proposalCreated"
    PROPOSAL_VOTING_STARTED = "proposalVotingStarted"
    PROPOSAL_VOTED = "proposalVoted"
    PROPOSAL_PASSED = "proposalPassed"
    PROPOSAL_REJECTED = "proposalRejected"
    IBC_TRANSFER_SENT = "ibcTransferSent"
    IBC_TRANSFER_RECEIVED = "ibcTransferReceived"
    VALIDATOR_SLASHED = "validatorSlashed"
    VALIDATOR_JAILED = "validatorJailed"
    CUSTOM = "custom"


# Categories filtered on the watched address
_ADDRESS_TEMPLATES = {
    EventCategory.TRANSFER_RECEIVED: "transfer.recipient='{}'",
    EventCategory.TRANSFER_SENT: "transfer.sender='{}'",
    EventCategory.DELEGATION_CREATED: "delegate.delegator='{}'",
    EventCategory.DELEGATION_UPDATED: "delegate.delegator='{}'",
    EventCategory.UNDELEGATION_STARTED: "unbond.delegator='{}'",
    EventCategory.REWARDS_WITHDRAWN: "withdraw_rewards.delegator='{}'",
}

_FIXED_TX_CONDITIONS = {
    EventCategory.UNDELEGATION_COMPLETED: "complete_unbonding.delegator EXISTS",
    EventCategory.REDELEGATION_STARTED: "redelegate.delegator EXISTS",
    EventCategory.PROPOSAL_CREATED: "submit_proposal.proposal_id EXISTS",
    EventCategory.PROPOSAL_VOTING_STARTED: "proposal_deposit.voting_period_start EXISTS",
    EventCategory.PROPOSAL_PASSED: "active_proposal.proposal_result='passed'",
    EventCategory.PROPOSAL_REJECTED: "active_proposal.proposal_result='rejected'",
    EventCategory.IBC_TRANSFER_SENT: "send_packet.packet_src_channel EXISTS",
    EventCategory.IBC_TRANSFER_RECEIVED: "recv_packet.packet_dst_channel EXISTS",
    EventCategory.VALIDATOR_JAILED: "liveness.jailed_until EXISTS",
}


def validate_query(query: str) -> str:
    """Return ``query`` unchanged if it parses, otherwise raise ``InvalidQuery``."""
    if not isinstance(query, str) or not _QUERY_RE.fullmatch(query):
        raise InvalidQuery(f"Malformed event query: {query!r}")
    return query


def build_query(
    category: Union[EventCategory, str],
    address: Optional[str] = None,
    validator: Optional[str] = None,
    proposal_id: Optional[int] = None,
    custom_query: Optional[str] = None,
) -> str:
    """Filter string for an event category.

    ``address``, ``validator`` and ``proposal_id`` are interpolated as given.
    """
    try:
        category = EventCategory(category)
    except ValueError:
        raise InvalidQuery(f"Unknown event category: {category!r}") from None

    if category is EventCategory.NEW_BLOCK:
        query = NEW_BLOCK
    elif category is EventCategory.NEW_TRANSACTION:
        query = TX
    elif category in _ADDRESS_TEMPLATES:
        if not address:
            raise MissingParameter("address")
        query = f"{TX} AND {_ADDRESS_TEMPLATES[category].format(address)}"
    elif category in _FIXED_TX_CONDITIONS:
        query = f"{TX} AND {_FIXED_TX_CONDITIONS[category]}"
    elif category is EventCategory.PROPOSAL_VOTED:
        if proposal_id and int(proposal_id) > 0:
            query = f"{TX} AND proposal_vote.proposal_id='{int(proposal_id)}'"
        else:
            query = f"{TX} AND proposal_vote.proposal_id EXISTS"
    elif category is EventCategory.VALIDATOR_SLASHED:
        if validator:
            query = f"{TX} AND slash.validator='{validator}'"
        else:
            query = f"{TX} AND slash.validator EXISTS"
    else:
        if not custom_query:
            raise MissingParameter("customQuery")
        query = custom_query

    return validate_query(query)
