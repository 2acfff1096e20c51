"""Bank model: a named, ordered selection of pedalboards."""

from pydantic import BaseModel, Field

# Bank id 1 is the host's implicit "all pedalboards" bank
ALL_PEDALBOARDS_BANK_ID = 1


class Bank(BaseModel):
    """A pedalboard bank as listed in the host's banks.json."""

    id: int = Field(ge=1, description="Bank id used in pedalboard-load commands")
    title: str = Field(default="Unnamed Bank", description="Display title")
    pedalboard_bundles: list[str] = Field(
        default_factory=list, description="Pedalboard bundle paths in bank order"
    )

    @property
    def is_all_pedalboards(self) -> bool:
        return self.id == ALL_PEDALBOARDS_BANK_ID

    @classmethod
    def all_pedalboards(cls) -> "Bank":
        return cls(id=ALL_PEDALBOARDS_BANK_ID, title="All Pedalboards")
