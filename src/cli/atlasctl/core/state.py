"""Composite resource identifiers and the local state file."""

from __future__ import annotations

import base64
import json
import os
import tempfile
from typing import Any, Optional

from atlasctl.core.errors import AtlasError, UserError

PAIR_SEPARATOR = "-"
KEY_VALUE_SEPARATOR = ":"


def encode_state_id(values: dict[str, str]) -> str:
    """
    Encode a mapping of identifying attributes into one opaque string.

    Keys are sorted so the result does not depend on insertion order. Each
    pair becomes `base64(key):base64(value)` and pairs are joined with
    `-`. Standard base64 never emits either separator, so any key or value
    round-trips through `decode_state_id`.

    Parameters
    ----------
    values : dict[str, str]
        Attributes that identify a resource, e.g. `project_id` and
        `role_name`.

    Returns
    -------
    str
        The encoded identifier.

    Examples
    --------
    >>> encode_state_id({"role_name": "reader", "project_id": "p1"})
    'cHJvamVjdF9pZA==:cDE=-cm9sZV9uYW1l:cmVhZGVy'
    """
    pairs = []
    for key in sorted(values):
        pairs.append(
            f"{_b64encode(key)}{KEY_VALUE_SEPARATOR}{_b64encode(values[key])}"
        )
    return PAIR_SEPARATOR.join(pairs)


def decode_state_id(state_id: str) -> dict[str, str]:
    """
    Decode an identifier produced by `encode_state_id`.

    Raises
    ------
    UserError
        If the identifier is not a valid encoding.
    """
    values: dict[str, str] = {}
    if not state_id:
        return values
    for pair in state_id.split(PAIR_SEPARATOR):
        key, sep, value = pair.partition(KEY_VALUE_SEPARATOR)
        if not sep:
            raise UserError(f"Malformed resource ID: {state_id}")
        try:
            values[_b64decode(key)] = _b64decode(value)
        except ValueError as e:
            raise UserError(f"Malformed resource ID: {state_id}") from e
    return values


def _b64encode(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def _b64decode(value: str) -> str:
    # binascii.Error and UnicodeDecodeError are both ValueErrors
    return base64.b64decode(value.encode("ascii"), validate=True).decode("utf-8")


class StateStore:
    """JSON file recording the resources atlasctl manages.

    The file holds `{"resources": {<state id>: <attributes>}}`. The
    remote API stays the source of truth; the store only remembers which
    resources exist and what was last applied to them.

    Parameters
    ----------
    path : str
        Path to the state file. It does not need to exist yet.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def ids(self) -> list[str]:
        """Return the IDs of all recorded resources."""
        return sorted(self._load())

    def get(self, state_id: str) -> Optional[dict[str, Any]]:
        """Return the attributes recorded for a resource, if any."""
        return self._load().get(state_id)

    def put(self, state_id: str, attributes: dict[str, Any]) -> None:
        """Record or replace the attributes of a resource."""
        resources = self._load()
        resources[state_id] = attributes
        self._save(resources)

    def remove(self, state_id: str) -> bool:
        """
        Forget a resource.

        Returns
        -------
        bool
            True if the resource was recorded.
        """
        resources = self._load()
        if state_id not in resources:
            return False
        del resources[state_id]
        self._save(resources)
        return True

    def _load(self) -> dict[str, Any]:
        if not os.path.isfile(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise AtlasError(f"Failed to read state file {self.path}: {str(e)}") from e
        if not isinstance(data, dict) or not isinstance(
            data.get("resources", {}), dict
        ):
            raise AtlasError(f"Invalid state file structure in {self.path}")
        return data.get("resources", {})

    def _save(self, resources: dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".state-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump({"resources": resources}, f, indent=2, sort_keys=True)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
