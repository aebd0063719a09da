"""User domain model — maps to the 'users' table."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float
from sqlalchemy.sql import func

from fitdesk.domain.roles import Role
from fitdesk.infrastructure.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=True, index=True)
    phone_number = Column(String(20), unique=True, nullable=True, index=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    is_trainer = Column(Boolean, nullable=False, default=False)

    # Personal details
    name = Column(String(200), nullable=True)
    mobile_number = Column(String(20), nullable=True)
    height = Column(Float, nullable=True)  # cm
    weight = Column(Float, nullable=True)  # kg

    # Body measurements (cm)
    measurements_chest = Column(Float, nullable=True)
    measurements_upper_waist = Column(Float, nullable=True)
    measurements_mid_waist = Column(Float, nullable=True)
    measurements_lower_waist = Column(Float, nullable=True)
    measurements_right_thigh = Column(Float, nullable=True)
    measurements_left_thigh = Column(Float, nullable=True)
    measurements_right_arm = Column(Float, nullable=True)
    measurements_left_arm = Column(Float, nullable=True)

    # Body composition analysis
    bca_weight = Column(Float, nullable=True)  # kg
    bca_bmi = Column(Float, nullable=True)
    bca_body_fat = Column(Float, nullable=True)  # %
    bca_muscle_rate = Column(Float, nullable=True)  # %
    bca_subcutaneous_fat = Column(Float, nullable=True)  # %
    bca_visceral_fat = Column(Float, nullable=True)  # level
    bca_body_age = Column(Integer, nullable=True)
    bca_bmr = Column(Float, nullable=True)  # kcal
    bca_skeletal_mass = Column(Float, nullable=True)  # kg
    bca_muscle_mass = Column(Float, nullable=True)  # kg
    bca_bone_mass = Column(Float, nullable=True)  # kg
    bca_protein = Column(Float, nullable=True)  # %

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def role(self) -> Role:
        return Role.from_flags(bool(self.is_admin), bool(self.is_trainer))

    def __repr__(self):
        return f"<User {self.id} {self.email or self.phone_number}>"
