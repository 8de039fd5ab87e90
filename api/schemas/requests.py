from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator

from infrastructure.security.passwords import MAX_PASSWORD_BYTES


class RegisterRequest(BaseModel):
	username: str = Field(..., min_length=3, max_length=64)
	email: EmailStr
	password: str = Field(..., min_length=8, max_length=72)
	first_name: str = Field('', max_length=100)
	last_name: str = Field('', max_length=100)

	@field_validator('password')
	@classmethod
	def password_fits_bcrypt(cls, value: str) -> str:
		if len(value.encode('utf-8')) > MAX_PASSWORD_BYTES:
			raise ValueError(f'password must be at most {MAX_PASSWORD_BYTES} bytes')
		return value


class LoginRequest(BaseModel):
	email: EmailStr
	password: str = Field(..., min_length=1)


class AccessTokenRequest(BaseModel):
	refresh_token: str = Field(..., min_length=1)


class ProviderCreateRequest(BaseModel):
	name: str = Field(..., min_length=1, max_length=100)
	base_url: HttpUrl
	api_key: str = Field(..., min_length=1)
	is_active: bool = True

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'name': 'currencyapi',
				'base_url': 'https://api.currencyapi.com/v3/latest',
				'api_key': 'cur_live_xxx',
				'is_active': True,
			}
		}
	)


class ProviderUpdateRequest(BaseModel):
	name: str | None = Field(None, min_length=1, max_length=100)
	base_url: HttpUrl | None = None
	api_key: str | None = Field(None, min_length=1)
	is_active: bool | None = None
