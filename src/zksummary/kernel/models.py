"""Journal and keyword models.

Field declaration order is the canonical serialization order; do not reorder.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator, model_validator

from zksummary.kernel.hash_utils import is_digest

MAX_KEYWORDS = 5

# Committed by the guest in place of its own identity; only the host may replace it.
PROGRAM_HASH_PLACEHOLDER = "<FILLED_BY_HOST>"


class Keyword(BaseModel):
    """A ranked word and its occurrence count."""
    word: StrictStr = Field(pattern=r"^[a-z]+$")
    count: StrictInt = Field(ge=1)

    model_config = ConfigDict(extra="forbid", frozen=True)


class Journal(BaseModel):
    """Public record binding program, input and output of one execution."""
    program_hash: StrictStr = Field(alias="programHash")
    input_hash: StrictStr = Field(alias="inputHash")
    output_hash: StrictStr = Field(alias="outputHash")
    keywords: List[Keyword] = Field(max_length=MAX_KEYWORDS)

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    @field_validator("input_hash", "output_hash")
    @classmethod
    def validate_digests(cls, v: str) -> str:
        if not is_digest(v):
            raise ValueError(f"expected 'sha256:' followed by 64 lowercase hex characters, got {v!r}")
        return v

    @field_validator("program_hash")
    @classmethod
    def validate_program_hash(cls, v: str) -> str:
        if not v:
            raise ValueError("programHash must not be empty")
        return v

    @model_validator(mode="after")
    def validate_ranked_order(self) -> "Journal":
        for prev, cur in zip(self.keywords, self.keywords[1:]):
            if (-prev.count, prev.word) >= (-cur.count, cur.word):
                raise ValueError(
                    f"keywords are not in ranked order at {prev.word!r} -> {cur.word!r}"
                )
        return self

    @property
    def is_finalized(self) -> bool:
        return self.program_hash != PROGRAM_HASH_PLACEHOLDER

    def finalize(self, program_hash: str) -> "Journal":
        """Return a copy whose programHash is the host-computed image identity."""
        if not program_hash or program_hash == PROGRAM_HASH_PLACEHOLDER:
            raise ValueError("program_hash must be a real image identity")
        return self.model_copy(update={"program_hash": program_hash})

    def to_wire(self) -> dict:
        """Plain dict in canonical field order with wire (camelCase) names."""
        return self.model_dump(by_alias=True)
