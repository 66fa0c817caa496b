#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
On-disk helpers shared by the entry cache and the usage tracker.

Both files are a single serialized GVariant, written with
GLib.file_set_contents (temp file + rename), so a crash mid-write leaves
the previous file in place.
"""
from __future__ import annotations

import os
from typing import Any, Optional

from gi.repository import GLib

from .errors import StorageError


def read_bytes(path: str) -> Optional[bytes]:
    """File contents, or None when the file does not exist."""
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageError(f"Failed to read '{path}': {e}") from e


def write_atomic(path: str, data: bytes) -> None:
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        GLib.file_set_contents(path, data)
    except (OSError, GLib.Error) as e:
        raise StorageError(f"Failed to write '{path}': {e}") from e


def encode_variant(type_string: str, value: Any) -> bytes:
    return GLib.Variant(type_string, value).get_data_as_bytes().get_data()


def decode_variant(type_string: str, data: bytes) -> Any:
    """
    Unpack `data` as a GVariant of `type_string`. GVariant happily reads
    garbage as default values, so anything not in normal form is rejected.
    """
    variant = GLib.Variant.new_from_bytes(
        GLib.VariantType.new(type_string), GLib.Bytes.new(data), False
    )
    if not variant.is_normal_form():
        raise StorageError(f"Data is not a valid '{type_string}' record")
    return variant.unpack()
