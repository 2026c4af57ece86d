"""2025 parameters for the shipped state modules."""

from calculator.state.state_tax_config import StateTaxConfig


# Illinois Form IL-1040: flat rate on net income after the exemption allowance
ILLINOIS_2025 = StateTaxConfig(
    state_code="IL",
    state_name="Illinois",
    tax_year=2025,
    is_flat_tax=True,
    flat_rate=0.0495,
    personal_exemption_amount=2850.0,
    eitc_percentage=0.20,
)


# California Form 540
# Schedule X: Single / MFS, Schedule Y: MFJ / QW, Schedule Z: HOH
_CA_SINGLE = [
    (0, 0.01),
    (11079, 0.02),
    (26264, 0.04),
    (41452, 0.06),
    (57542, 0.08),
    (72724, 0.093),
    (371479, 0.103),
    (445771, 0.113),
    (742953, 0.123),
]
_CA_JOINT = [
    (0, 0.01),
    (22158, 0.02),
    (52528, 0.04),
    (82904, 0.06),
    (115084, 0.08),
    (145448, 0.093),
    (742958, 0.103),
    (891542, 0.113),
    (1485906, 0.123),
]
_CA_HOH = [
    (0, 0.01),
    (22173, 0.02),
    (52530, 0.04),
    (67716, 0.06),
    (83805, 0.08),
    (98990, 0.093),
    (505208, 0.103),
    (606251, 0.113),
    (1010417, 0.123),
]

CALIFORNIA_2025 = StateTaxConfig(
    state_code="CA",
    state_name="California",
    tax_year=2025,
    is_flat_tax=False,
    brackets={
        "single": _CA_SINGLE,
        "married_separate": _CA_SINGLE,
        "married_joint": _CA_JOINT,
        "qualifying_widow": _CA_JOINT,
        "head_of_household": _CA_HOH,
    },
    standard_deduction={
        "single": 5706.0,
        "married_separate": 5706.0,
        "married_joint": 11412.0,
        "qualifying_widow": 11412.0,
        "head_of_household": 11412.0,
    },
    personal_exemption_credit=153.0,
    dependent_exemption_credit=475.0,
    exemption_credit_phaseout_start={
        "single": 252203.0,
        "married_separate": 252203.0,
        "married_joint": 504411.0,
        "qualifying_widow": 504411.0,
        "head_of_household": 378310.0,
    },
    exemption_credit_phaseout_step=2500.0,
    exemption_credit_phaseout_rate=0.06,
    # Mental Health Services Tax, not doubled for joint filers
    surtax_threshold=1000000.0,
    surtax_rate=0.01,
    renter_credit_single=60.0,
    renter_credit_joint=120.0,
    renter_credit_income_limit_single=53994.0,
    renter_credit_income_limit_joint=107987.0,
)


# Pennsylvania PA-40: flat rate on the sum of positive income classes
PENNSYLVANIA_2025 = StateTaxConfig(
    state_code="PA",
    state_name="Pennsylvania",
    tax_year=2025,
    is_flat_tax=True,
    flat_rate=0.0307,
)


STATE_CONFIGS_2025 = {
    config.state_code: config
    for config in (ILLINOIS_2025, CALIFORNIA_2025, PENNSYLVANIA_2025)
}
