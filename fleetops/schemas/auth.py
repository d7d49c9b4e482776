from pydantic import BaseModel


class EmailSignInRequest(BaseModel):
    email: str = ""
    password: str = ""


class PhoneSignInRequest(BaseModel):
    phone: str = ""
