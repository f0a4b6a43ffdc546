from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .dto import BallotConfig, ProposalSpec, VoteSpec


def _require(payload: dict[str, Any], key: str, expected_type: type) -> Any:
    if key not in payload:
        raise ValueError(f"Missing required field '{key}' in ballot config")
    value = payload[key]
    if expected_type is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"Field '{key}' must be int")
        return value
    if not isinstance(value, expected_type):
        raise ValueError(f"Field '{key}' must be {expected_type.__name__}")
    return value


def _require_list_of_objects(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    if key not in payload:
        return []
    items = _require(payload, key, list)
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"Field '{key}[{i}]' must be a JSON object")
    return items


def parse_ballot_config(payload: object) -> BallotConfig:
    if not isinstance(payload, dict):
        raise ValueError("Ballot config must be a JSON object")

    voters: list[str] = []
    if "voters" in payload:
        for i, value in enumerate(_require(payload, "voters", list)):
            if not isinstance(value, str):
                raise ValueError(f"Field 'voters[{i}]' must be str")
            voters.append(value)

    ballot_id = None
    if "ballot_id" in payload:
        ballot_id = _require(payload, "ballot_id", str)

    config = BallotConfig(
        administrator=_require(payload, "administrator", str),
        voters=voters,
        proposals=[
            ProposalSpec(
                voter=_require(item, "voter", str),
                description=_require(item, "description", str),
            )
            for item in _require_list_of_objects(payload, "proposals")
        ],
        votes=[
            VoteSpec(
                voter=_require(item, "voter", str),
                proposal_id=_require(item, "proposal_id", int),
            )
            for item in _require_list_of_objects(payload, "votes")
        ],
        ballot_id=ballot_id,
    )
    config.validate()
    return config


def load_ballot_config(path: Path | str) -> BallotConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"Ballot config not found: {config_path}")
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Ballot config is not valid JSON: {exc}") from exc
    return parse_ballot_config(payload)
