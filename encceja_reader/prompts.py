"""
Instruction text and response schemas sent to the model.

The schema is derived from ReportCardExtraction so the field names and
per-field descriptions have a single source.
"""

from typing import Any

from .config import GRADE_FIELDS
from .models import ReportCardExtraction


EXTRACTION_PROMPT = """
Analise este documento (imagem ou PDF) de um boletim escolar do Encceja.

Extraia as notas das seguintes áreas de conhecimento, se estiverem visíveis:
1. Ciências da Natureza
2. Ciências Humanas
3. Linguagens
4. Matemática
5. Redação

Também extraia:
- O Nome do participante (se visível).
- A Unidade Certificadora ou Instituição (geralmente no cabeçalho ou rodapé).
  A instituição certificadora NUNCA é o nome de uma pessoa.

Retorne NULL se a nota não estiver visível ou legível.
As notas numéricas geralmente vão de 60 a 180, e a redação de 0 a 10.
"""


def build_prompt() -> str:
    """Return the extraction instruction sent with every report card."""
    return EXTRACTION_PROMPT.strip()


def schema_fields() -> list[tuple[str, str, str]]:
    """
    List (wire name, JSON type, description) for each extraction field.

    Returns:
        Tuples in declaration order.
    """
    fields = []
    for field in ReportCardExtraction.model_fields.values():
        json_type = "number" if field.alias in GRADE_FIELDS else "string"
        fields.append((field.alias, json_type, field.description or ""))
    return fields


def build_response_schema() -> dict[str, Any]:
    """
    Build the JSON Schema constraining the model output.

    Every property is required but nullable, which is how strict structured
    output expresses "null when not legible".

    Returns:
        JSON Schema dictionary.
    """
    properties = {
        name: {"type": [json_type, "null"], "description": description}
        for name, json_type, description in schema_fields()
    }
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }

