from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, StrictInt, field_validator, model_validator


class EntryDTO(BaseModel):
    text: Optional[str] = None
    runes: Optional[List[Union[StrictInt, str]]] = None
    weights: List[List[StrictInt]]

    @field_validator("runes")
    @classmethod
    def _parse_runes(cls, value: Optional[List[Union[int, str]]]) -> Optional[List[int]]:
        if value is None:
            return None
        parsed: List[int] = []
        for rune in value:
            if isinstance(rune, str):
                if not rune.upper().startswith("U+"):
                    raise ValueError(f"string runes need a U+ prefix: {rune!r}")
                rune = int(rune[2:], 16)
            if not 0 <= rune <= 0x10FFFF:
                raise ValueError(f"rune {rune:#x} outside the code point range")
            parsed.append(rune)
        return parsed

    @field_validator("weights")
    @classmethod
    def _check_weights(cls, value: List[List[int]]) -> List[List[int]]:
        for element in value:
            if len(element) > 4:
                raise ValueError("an element holds at most four weights")
            if any(weight < 0 for weight in element):
                raise ValueError("weights must be non-negative")
        return value

    @model_validator(mode="after")
    def _require_key(self) -> "EntryDTO":
        if not self.text and not self.runes:
            raise ValueError("entry needs non-empty 'runes' or 'text'")
        return self

    def key(self) -> List[int]:
        if self.text:
            return [ord(char) for char in self.text]
        return [int(rune) for rune in self.runes or []]


class EntriesDocument(BaseModel):
    entries: List[EntryDTO]
