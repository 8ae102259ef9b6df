"""
Pydantic models for the Encceja Report Reader.

Defines the raw extraction schema requested from the model and the
sanitized result handed back to callers.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .validators import compute_is_passing


class ReportCardExtraction(BaseModel):
    """
    Raw report card fields as returned by the model.

    Field descriptions are sent to the model as part of the response
    schema, so they are written in the language of the document.

    Attributes:
        natural_sciences: Natural sciences grade (nominal 60-180).
        human_sciences: Human sciences grade (nominal 60-180).
        languages: Languages grade (nominal 60-180).
        mathematics: Mathematics grade (nominal 60-180).
        essay: Essay grade (nominal 0-10).
        student_name: Participant name, if visible.
        certifying_institution: Issuing authority of the report card.
    """

    model_config = ConfigDict(populate_by_name=True)

    natural_sciences: int | float | None = Field(
        default=None, alias="naturalSciences",
        description="Nota de Ciências da Natureza e suas Tecnologias",
    )
    human_sciences: int | float | None = Field(
        default=None, alias="humanSciences",
        description="Nota de Ciências Humanas e suas Tecnologias",
    )
    languages: int | float | None = Field(
        default=None, alias="languages",
        description="Nota de Linguagens, Códigos e suas Tecnologias",
    )
    mathematics: int | float | None = Field(
        default=None, alias="mathematics",
        description="Nota de Matemática e suas Tecnologias",
    )
    essay: int | float | None = Field(
        default=None, alias="essay",
        description="Nota da Redação",
    )
    student_name: str | None = Field(
        default=None, alias="studentName",
        description="Nome do participante",
    )
    certifying_institution: str | None = Field(
        default=None, alias="certifyingInstitution",
        description=(
            "Órgão oficial certificador (INEP, Secretaria de Educação, "
            "Instituto Federal). NÃO é nome de pessoa."
        ),
    )


class ReportCardData(ReportCardExtraction):
    """
    Sanitized report card returned by the analyzer.

    Grades that were not legible stay as explicit None. ``history`` and
    ``is_passing`` are derived and cannot be set.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @computed_field(alias="history")
    @property
    def history(self) -> str | None:
        return self.certifying_institution or None

    @computed_field(alias="isPassing")
    @property
    def is_passing(self) -> bool:
        return compute_is_passing(self.grades())

    def grades(self) -> dict[str, int | float | None]:
        """Return the five grades keyed by their wire names."""
        return {
            "naturalSciences": self.natural_sciences,
            "humanSciences": self.human_sciences,
            "languages": self.languages,
            "mathematics": self.mathematics,
            "essay": self.essay,
        }

    def to_dict(self) -> dict:
        """
        Serialize with wire (camelCase) names.

        Null grades are kept; ``history`` is omitted when there is no
        institution to mirror.
        """
        data = self.model_dump(by_alias=True)
        if data.get("history") is None:
            data.pop("history", None)
        return data
