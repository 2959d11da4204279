"""
Reactor Transient Inputs and Thermal Feedback

Building blocks for a point-reactor transient driver:

- TimeSeriesTable: externally imposed reactivity and source, tabulated against
  time, with step interpolation and slope estimates
- ThermalFeedbackModel: lumped reactor temperature advanced by explicit Euler,
  returning a temperature reactivity feedback per step
- load_input_deck: reader for the plain-text transient input file

Example:
    >>> from reactor_transient import ThermalFeedbackModel, load_input_deck
    >>> deck = load_input_deck('ramp.inp')
    >>> model = ThermalFeedbackModel()
    >>> rho = deck.table.reactivity_at(5.0) + model.step_feedback(flux=1000.0, dt=0.1)
"""

__version__ = "1.0.0"

from reactor_transient.config import ThermalFeedbackConfig
from reactor_transient.feedback import (
    FeedbackStep,
    ReactorThermalState,
    ThermalFeedbackModel,
    euler_temperature_increment,
)
from reactor_transient.table import TableField, TableSample, TimeSeriesTable
from reactor_transient.input_deck import InputDeck, load_input_deck, parse_input_deck
from reactor_transient.exceptions import (
    ReactorTransientError,
    ConfigurationError,
    InvalidTableError,
    OutOfRangeError,
    InputDeckError,
    MalformedRowError,
    InsufficientDataError,
)

__all__ = [
    'ThermalFeedbackConfig',
    'ThermalFeedbackModel',
    'ReactorThermalState',
    'FeedbackStep',
    'euler_temperature_increment',
    'TableField',
    'TableSample',
    'TimeSeriesTable',
    'InputDeck',
    'load_input_deck',
    'parse_input_deck',
    'ReactorTransientError',
    'ConfigurationError',
    'InvalidTableError',
    'OutOfRangeError',
    'InputDeckError',
    'MalformedRowError',
    'InsufficientDataError',
]
