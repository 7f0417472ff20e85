"""Composer profile model.

Only the fields the conversation core needs to voice a composer; the
catalog that supplies profiles lives outside this package.
"""

from pydantic import BaseModel, ConfigDict, Field


class ComposerProfile(BaseModel):
    """Identity and biography of a historical composer."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable subject identifier")
    name: str = Field(..., min_length=1, description="Display name")
    era: str | list[str] = Field(..., description="Musical era(s)")
    nationality: str = Field(default="", description="Nationality used for greetings")
    birth_year: int | None = Field(default=None)
    death_year: int | None = Field(default=None, description="None while living")
    country: str = Field(default="")
    famous_works: list[str] = Field(default_factory=list)
    bio: str = Field(default="", description="Short biography")
    long_bio: str = Field(default="", description="Detailed biography for prompts")
    notable_quotes: list[str] = Field(default_factory=list)

    @property
    def primary_era(self) -> str:
        return self.era[0] if isinstance(self.era, list) else self.era

    @property
    def era_label(self) -> str:
        return " and ".join(self.era) if isinstance(self.era, list) else self.era

    @property
    def years(self) -> str:
        birth = str(self.birth_year) if self.birth_year is not None else "?"
        death = str(self.death_year) if self.death_year is not None else "present"
        return f"{birth}-{death}"
