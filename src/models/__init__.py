from .traced import TracedValue, DocumentSource, ComputedSource
from .taxpayer import TaxpayerInfo, FilingStatus, Dependent, DependentRelationship
from .income import (
    W2Info,
    Form1099INT,
    Form1099DIV,
    Form1099NEC,
    CapitalTransaction,
    ScheduleCBusiness,
    ScheduleEProperty,
    ScheduleK1,
    K1EntityType,
    ISOExercise,
)
from .deductions import Deductions, DeductionMethod, ItemizedDeductions
from .state import ResidencyType, StateReturnConfig
from .tax_return import TaxReturn

__all__ = [
    'TracedValue',
    'DocumentSource',
    'ComputedSource',
    'TaxpayerInfo',
    'FilingStatus',
    'Dependent',
    'DependentRelationship',
    'W2Info',
    'Form1099INT',
    'Form1099DIV',
    'Form1099NEC',
    'CapitalTransaction',
    'ScheduleCBusiness',
    'ScheduleEProperty',
    'ScheduleK1',
    'K1EntityType',
    'ISOExercise',
    'Deductions',
    'DeductionMethod',
    'ItemizedDeductions',
    'ResidencyType',
    'StateReturnConfig',
    'TaxReturn',
]
