from pydantic import Field
from typing import Literal, Optional

from reportverse.schemas.common import CamelModel

ParentOccupation = Literal[
    "Entrepreneur", "Family business", "Public Sector", "Professional",
    "Govt. Employee", "Pvt. Company", "Other",
]
MotherOccupation = Literal[
    "Home Maker", "Entrepreneur", "Family business", "Public Sector", "Professional",
    "Govt. Employee", "Pvt. Company", "Other",
]


class AlumniFamily(CamelModel):
    status: bool = False
    details: Optional[str] = None


class FatherDetails(CamelModel):
    name: Optional[str] = None
    occupation: Optional[ParentOccupation] = None
    organization_designation: Optional[str] = None
    mobile_no: Optional[str] = None
    email_id: Optional[str] = None


class MotherDetails(FatherDetails):
    occupation: Optional[MotherOccupation] = None


class Address(CamelModel):
    address: Optional[str] = None
    pin_code: Optional[str] = None


class ProfileBase(CamelModel):
    name: str = Field(..., min_length=1)
    registration_no: str = Field(..., min_length=1)
    section: Optional[str] = None
    roll_no: Optional[str] = None
    branch: Optional[str] = None
    mobile_no: Optional[str] = None
    hostel_block_no: Optional[str] = None
    room_no: Optional[str] = None
    blood_group: Optional[str] = None
    dob: Optional[str] = None
    alumni_family: Optional[AlumniFamily] = None
    father_details: Optional[FatherDetails] = None
    mother_details: Optional[MotherDetails] = None
    communication_address: Optional[Address] = None
    permanent_address: Optional[Address] = None


class ProfileCreate(ProfileBase):
    pass


class ProfileUpdate(CamelModel):
    """Only the submitted fields are written"""
    name: Optional[str] = None
    registration_no: Optional[str] = None
    section: Optional[str] = None
    roll_no: Optional[str] = None
    branch: Optional[str] = None
    mobile_no: Optional[str] = None
    hostel_block_no: Optional[str] = None
    room_no: Optional[str] = None
    blood_group: Optional[str] = None
    dob: Optional[str] = None
    alumni_family: Optional[AlumniFamily] = None
    father_details: Optional[FatherDetails] = None
    mother_details: Optional[MotherDetails] = None
    communication_address: Optional[Address] = None
    permanent_address: Optional[Address] = None


class ProfileResponse(ProfileBase):
    id: str
    mentee_id: str
