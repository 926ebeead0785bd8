"""Governance module for proposal operations."""

from typing import Any, Dict, Mapping, Union

from dateutil import parser

from ..constants import PROPOSAL_STATUS, VOTE_OPTIONS
from ..types import VoteOption
from .base import Params, ResourceModule, optional, require, require_int

_TIME_FIELDS = {
    "submit_time": "submitTime",
    "deposit_end_time": "depositEndTime",
    "voting_start_time": "votingStartTime",
    "voting_end_time": "votingEndTime",
}

_GOV_PARAM_TYPES = ("voting", "deposit", "tallying")


def parse_vote_option(value: Union[str, int]) -> VoteOption:
    """Accept ``VOTE_OPTION_YES``, ``yes``, ``no_with_veto`` or the numeric value."""
    if isinstance(value, int) or str(value).isdigit():
        option = VoteOption(int(value))
    else:
        name = str(value).strip().upper()
        if not name.startswith("VOTE_OPTION_"):
            name = f"VOTE_OPTION_{name}"
        if name not in VOTE_OPTIONS:
            raise ValueError(f"Unknown vote option: {value}")
        option = VoteOption(VOTE_OPTIONS[name])
    if option is VoteOption.UNSPECIFIED:
        raise ValueError("Vote option must not be unspecified")
    return option


def status_name(status: Union[str, int, None]) -> str:
    """``PROPOSAL_STATUS_VOTING_PERIOD`` -> ``Voting Period``."""
    if isinstance(status, int) or (isinstance(status, str) and status.isdigit()):
        names = {v: k for k, v in PROPOSAL_STATUS.items()}
        status = names.get(int(status), "PROPOSAL_STATUS_UNSPECIFIED")
    if not status:
        return "Unknown"
    return str(status).replace("PROPOSAL_STATUS_", "").replace("_", " ").title()


def enrich_proposal(proposal: Mapping[str, Any]) -> Dict[str, Any]:
    """Add a readable status and parsed timestamps to a proposal record."""
    output = dict(proposal)
    output["statusName"] = status_name(proposal.get("status"))
    for field, key in _TIME_FIELDS.items():
        value = proposal.get(field)
        if not value:
            continue
        timestamp = parser.isoparse(value)
        # Zero time marks a phase that has not started
        if timestamp.year <= 1:
            continue
        output[key] = timestamp.isoformat()
        output[f"{key}Unix"] = int(timestamp.timestamp())
    return output


class GovernanceModule(ResourceModule):
    """Governance resource."""

    resource = "governance"
    OPERATIONS = {
        "getProposals": "get_proposals",
        "getProposal": "get_proposal",
        "getProposalDeposits": "get_proposal_deposits",
        "getProposalVotes": "get_proposal_votes",
        "getProposalTally": "get_proposal_tally",
        "vote": "vote",
        "getVote": "get_vote",
        "getGovParams": "get_gov_params",
    }

    async def get_proposals(self, params: Params) -> Dict[str, Any]:
        """Get proposals, optionally filtered by status."""
        status = optional(params, "status")
        if status and status not in PROPOSAL_STATUS:
            raise ValueError(f"Unknown proposal status: {status}")
        data = await self.client.lcd.get_proposals(status)
        output = dict(data)
        output["proposals"] = [enrich_proposal(p) for p in data.get("proposals") or []]
        return output

    async def get_proposal(self, params: Params) -> Dict[str, Any]:
        data = await self.client.lcd.get_proposal(require_int(params, "proposalId"))
        output = dict(data)
        if data.get("proposal"):
            output["proposal"] = enrich_proposal(data["proposal"])
        return output

    async def get_proposal_deposits(self, params: Params) -> Any:
        return await self.client.lcd.get_proposal_deposits(require_int(params, "proposalId"))

    async def get_proposal_votes(self, params: Params) -> Any:
        return await self.client.lcd.get_proposal_votes(require_int(params, "proposalId"))

    async def get_proposal_tally(self, params: Params) -> Any:
        return await self.client.lcd.get_proposal_tally(require_int(params, "proposalId"))

    async def vote(self, params: Params) -> Dict[str, Any]:
        """Vote on a proposal."""
        option = parse_vote_option(require(params, "voteOption"))
        async with self.client.signer() as signer:
            result = await signer.vote(
                require_int(params, "proposalId"),
                option,
                memo=optional(params, "memo", ""),
            )
        return result.to_dict()

    async def get_vote(self, params: Params) -> Any:
        return await self.client.lcd.get_vote(
            require_int(params, "proposalId"), require(params, "voter")
        )

    async def get_gov_params(self, params: Params) -> Any:
        params_type = optional(params, "paramsType", "voting")
        if params_type not in _GOV_PARAM_TYPES:
            raise ValueError(f"Unknown governance params type: {params_type}")
        return await self.client.lcd.get_gov_params(params_type)
