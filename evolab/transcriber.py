"""Decoding of encoded substrates into the substrates networks are built from."""

from __future__ import annotations

from typing import Protocol

from .substrate import Substrate, conn_sort_key, node_sort_key


class Transcriber(Protocol):
    def transcribe(self, encoded: Substrate) -> Substrate: ...


class NEATTranscriber:
    """Copies every node and only the enabled connections, in canonical order."""

    def transcribe(self, encoded: Substrate) -> Substrate:
        return Substrate(
            nodes=sorted(encoded.nodes, key=node_sort_key),
            conns=sorted(
                (conn for conn in encoded.conns if conn.enabled),
                key=conn_sort_key,
            ),
        )

    def __repr__(self) -> str:
        return "NEATTranscriber()"


__all__ = ["NEATTranscriber", "Transcriber"]
