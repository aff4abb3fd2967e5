"""Per-specialty booking options for the two clinics."""

from dataclasses import dataclass
from enum import Enum


class Specialty(str, Enum):
    EYECARE = 'eyecare'
    GYNECOLOGY = 'gynecology'


ALL_SCOPE = 'all'

AFTERNOON_SLOT = 'Afternoon (12 PM - 3 PM)'
EVENING_SLOT = 'Evening (3 PM - 6 PM)'


@dataclass(frozen=True)
class SpecialtyProfile:
    specialty: Specialty
    display_name: str
    doctor: str
    clinic: str
    time_slots: tuple[str, ...]
    reasons: tuple[str, ...]
    closed_weekdays: frozenset[int] = frozenset()
    header_color: str = '#3182CE'
    background_color: str = '#EBF8FF'

    @property
    def doctor_title(self) -> str:
        return f'Dr. {self.doctor}'


SPECIALTY_PROFILES: dict[Specialty, SpecialtyProfile] = {
    Specialty.EYECARE: SpecialtyProfile(
        specialty=Specialty.EYECARE,
        display_name='Eye Care',
        doctor='Sanjeev Lehri',
        clinic='Eyefem Eye Care Clinic',
        time_slots=('Morning (10 AM - 12 PM)', AFTERNOON_SLOT, EVENING_SLOT),
        reasons=(
            'Routine Eye Examination',
            'Cataract Consultation',
            'LASIK / Refractive Surgery',
            'Glaucoma Check-up',
            'Other',
        ),
        # Sunday
        closed_weekdays=frozenset({6}),
        header_color='#3182CE',
        background_color='#EBF8FF',
    ),
    Specialty.GYNECOLOGY: SpecialtyProfile(
        specialty=Specialty.GYNECOLOGY,
        display_name='Gynecology',
        doctor='Nisha Bhatnagar',
        clinic='Eyefem Gynecology Clinic',
        time_slots=('Morning (9 AM - 12 PM)', AFTERNOON_SLOT, EVENING_SLOT),
        reasons=(
            'General Gynecology Check-up',
            'Fertility Consultation',
            'Pregnancy Care',
            'PCOS Management',
            'Menopause Management',
            'Other',
        ),
        header_color='#D53F8C',
        background_color='#FFF5F7',
    ),
}


def get_profile(specialty: Specialty | str) -> SpecialtyProfile:
    return SPECIALTY_PROFILES[Specialty(specialty)]


def is_valid_scope(scope: str) -> bool:
    return scope == ALL_SCOPE or scope in {specialty.value for specialty in Specialty}
