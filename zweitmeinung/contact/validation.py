"""
Formulaire de contact : schéma de validation (messages en allemand) et
dérivation des règles de champ pour le rendu HTML.
"""
import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PHONE_PATTERN = r"^(\+49|0)[1-9]\d{1,14}$"

# Interdits dans les champs repris en en-tête d'e-mail
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

MEDICAL_SPECIALTIES = [
    {"value": "",                "label": "Fachbereich auswählen..."},
    {"value": "kardiologie",     "label": "Kardiologie - Herz & Kreislauf"},
    {"value": "onkologie",       "label": "Onkologie - Krebstherapie"},
    {"value": "intensivmedizin", "label": "Intensivmedizin"},
    {"value": "chirurgie",       "label": "Chirurgie - Operationen"},
    {"value": "radiologie",      "label": "Radiologie - Bildgebung"},
    {"value": "neurologie",      "label": "Neurologie"},
    {"value": "orthopaedie",     "label": "Orthopädie"},
    {"value": "dermatologie",    "label": "Dermatologie"},
    {"value": "paediatrie",      "label": "Pädiatrie - Kinderheilkunde"},
    {"value": "other",           "label": "Anderer Fachbereich"},
]

URGENCY_LEVELS = [
    {"value": "low",       "label": "Niedrig - Allgemeine Beratung",       "color": "#10B981"},
    {"value": "medium",    "label": "Mittel - Zeitnahe Antwort gewünscht", "color": "#F59E0B"},
    {"value": "high",      "label": "Hoch - Wichtige medizinische Frage",  "color": "#EF4444"},
    {"value": "emergency", "label": "Notfall - Sofortige Hilfe benötigt",  "color": "#DC2626"},
]

CONTACT_PREFERENCES = [
    {"value": "email", "label": "E-Mail bevorzugt"},
    {"value": "phone", "label": "Telefon bevorzugt"},
    {"value": "both",  "label": "E-Mail und Telefon"},
]


def _invalid(message: str) -> PydanticCustomError:
    return PydanticCustomError("contact_form", message)


def _length(value: str, min_len: int, max_len: int, too_short: str, single_line: bool = False) -> str:
    value = value.strip()
    if single_line and CONTROL_CHARS.search(value):
        raise _invalid("Enthält ungültige Zeichen (z. B. Zeilenumbrüche).")
    if len(value) < min_len:
        raise _invalid(too_short)
    if len(value) > max_len:
        raise _invalid(f"Maximal {max_len} Zeichen.")
    return value


# ── Données soumises ─────────────────────────────────────────────────────────

class ContactFormData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    specialty: Optional[str] = None
    urgency: Literal["low", "medium", "high", "emergency"]
    preferredContact: Literal["email", "phone", "both"]
    consent: bool
    newsletter: bool = False
    captchaToken: Optional[str] = None

    @field_validator("firstName")
    @classmethod
    def _first_name(cls, v: str) -> str:
        return _length(v, 2, 50, "Vorname muss mindestens 2 Zeichen lang sein", single_line=True)

    @field_validator("lastName")
    @classmethod
    def _last_name(cls, v: str) -> str:
        return _length(v, 2, 50, "Nachname muss mindestens 2 Zeichen lang sein", single_line=True)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        if not re.match(EMAIL_PATTERN, v.strip()):
            raise _invalid("Ungültige E-Mail-Adresse")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if not re.match(PHONE_PATTERN, v.replace(" ", "")):
            raise _invalid("Ungültige Telefonnummer")
        return v

    @field_validator("subject")
    @classmethod
    def _subject(cls, v: str) -> str:
        return _length(v, 5, 200, "Betreff muss mindestens 5 Zeichen lang sein", single_line=True)

    @field_validator("message")
    @classmethod
    def _message(cls, v: str) -> str:
        return _length(v, 20, 2000, "Nachricht muss mindestens 20 Zeichen lang sein")

    @field_validator("consent")
    @classmethod
    def _consent(cls, v: bool) -> bool:
        if v is not True:
            raise _invalid("Zustimmung zur Datenschutzerklärung ist erforderlich")
        return v


def error_details(exc) -> List[Dict[str, str]]:
    """ValidationError → [{field, message}]."""
    return [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


# ── Configuration des champs ─────────────────────────────────────────────────

class FieldOption(BaseModel):
    value: str
    label: str


class FieldValidation(BaseModel):
    minLength: Optional[int] = Field(None, ge=0)
    maxLength: Optional[int] = Field(None, ge=0)
    pattern: Optional[str] = None


class FormFieldConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    label: str
    type: Literal["text", "email", "tel", "select", "textarea", "checkbox", "radio"] = "text"
    required: bool = False
    placeholder: Optional[str] = None
    options: List[FieldOption] = Field(default_factory=list)
    validation: Optional[FieldValidation] = None


def validation_rules(field: FormFieldConfig) -> Dict[str, Any]:
    """
    Règles de validation d'un champ, dérivées de sa configuration.

    >>> validation_rules(FormFieldConfig(name="subject", label="Betreff", required=True,
    ...                                  validation={"minLength": 5}))
    {'required': 'Dieses Feld ist erforderlich.', 'minLength': {'value': 5, 'message': 'Mindestens 5 Zeichen.'}}
    """
    rules: Dict[str, Any] = {}
    if field.required:
        rules["required"] = "Dieses Feld ist erforderlich."

    v = field.validation
    if v is None:
        return rules
    if v.minLength:
        rules["minLength"] = {"value": v.minLength, "message": f"Mindestens {v.minLength} Zeichen."}
    if v.maxLength:
        rules["maxLength"] = {"value": v.maxLength, "message": f"Maximal {v.maxLength} Zeichen."}
    if v.pattern:
        rules["pattern"] = {"value": v.pattern, "message": "Ungültiges Format."}
    return rules


DEFAULT_CONTACT_FIELDS: List[FormFieldConfig] = [
    FormFieldConfig(name="firstName", label="Vorname", required=True,
                    validation=FieldValidation(minLength=2, maxLength=50)),
    FormFieldConfig(name="lastName", label="Nachname", required=True,
                    validation=FieldValidation(minLength=2, maxLength=50)),
    FormFieldConfig(name="email", label="E-Mail", type="email", required=True,
                    validation=FieldValidation(pattern=EMAIL_PATTERN)),
    FormFieldConfig(name="phone", label="Telefon", type="tel",
                    validation=FieldValidation(pattern=PHONE_PATTERN)),
    FormFieldConfig(name="specialty", label="Fachbereich", type="select",
                    options=[FieldOption(**o) for o in MEDICAL_SPECIALTIES]),
    FormFieldConfig(name="urgency", label="Dringlichkeit", type="select", required=True,
                    options=[FieldOption(value=o["value"], label=o["label"]) for o in URGENCY_LEVELS]),
    FormFieldConfig(name="preferredContact", label="Bevorzugter Kontakt", type="select", required=True,
                    options=[FieldOption(**o) for o in CONTACT_PREFERENCES]),
    FormFieldConfig(name="subject", label="Betreff", required=True,
                    validation=FieldValidation(minLength=5, maxLength=200)),
    FormFieldConfig(name="message", label="Nachricht", type="textarea", required=True,
                    validation=FieldValidation(minLength=20, maxLength=2000)),
    FormFieldConfig(name="consent", label="Ich stimme der Datenschutzerklärung zu", type="checkbox",
                    required=True),
]
