"""Request bodies accepted by the JSON API.

Each pydantic model describes one endpoint's body; ``parse_body`` turns
pydantic's errors into the service's ``ValidationError`` so every field
problem comes back in one 400 response.
"""

from pydantic import BaseModel, EmailStr, Field, StrictInt, constr, field_validator
from pydantic import ValidationError as SchemaError

from arena.errors import ValidationError
from arena.services.games.integrity import DURATION_RANGE, SCORE_RANGE, WAVE_RANGE

Username = constr(strip_whitespace=True, min_length=3, max_length=30, pattern=r'^[A-Za-z0-9_]+$')


class _EmailBody(BaseModel):
    email: EmailStr

    @field_validator('email', mode='before')
    @classmethod
    def normalise_email(cls, v):
        # Addresses are unique case-insensitively
        return v.strip().lower() if isinstance(v, str) else v


class RegisterBody(_EmailBody):
    username: Username
    password: str = Field(..., min_length=6)


class LoginBody(_EmailBody):
    password: str = Field(..., min_length=1)


class SessionBody(BaseModel):
    score: StrictInt = Field(..., ge=SCORE_RANGE[0], le=SCORE_RANGE[1])
    waveReached: StrictInt = Field(..., ge=WAVE_RANGE[0], le=WAVE_RANGE[1])
    duration: StrictInt = Field(..., ge=DURATION_RANGE[0], le=DURATION_RANGE[1])


def parse_body(schema, body):
    try:
        return schema.model_validate(body if isinstance(body, dict) else {})
    except SchemaError as exc:
        details = [
            {'field': '.'.join(str(part) for part in err['loc']), 'message': err['msg']}
            for err in exc.errors()
        ]
        raise ValidationError('Validation failed', details=details)


def query_limit(args, name='limit'):
    """Parse ?limit=; anything non-numeric falls back to the default (None)."""
    raw = args.get(name)
    try:
        return int(raw) if raw is not None else None
    except ValueError:
        return None
