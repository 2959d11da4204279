"""
Thermal Feedback Model

This module implements a lumped thermal feedback mechanism for reactor
transient simulation. Fission heating raises a single reactor temperature,
conduction and radiation pull it back toward equilibrium, and every change in
temperature is turned into a reactivity correction through a temperature
coefficient.

The temperature is advanced with one explicit Euler step per call. The step
is evaluated in IEEE double precision: a time step beyond the stability limit
drives the temperature to inf/nan instead of raising.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from reactor_transient.config import ThermalFeedbackConfig
from reactor_transient.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class ReactorThermalState:
    """Mutable temperature state advanced by a ThermalFeedbackModel"""

    temperature: float  # K

    @classmethod
    def at_equilibrium(cls, config: ThermalFeedbackConfig) -> "ReactorThermalState":
        return cls(temperature=config.equilibrium_temperature)


@dataclass(frozen=True)
class FeedbackStep:
    """Terms of a single explicit Euler feedback step"""

    flux: float
    dt: float
    heating: float
    conduction_loss: float
    radiation_loss: float
    delta_temperature: float
    temperature: float  # temperature after the step
    feedback: float  # Δk/k


def heat_balance(temperature: float, flux: float, config: ThermalFeedbackConfig):
    """
    Evaluate the heat source and loss terms at a given temperature

    Returns:
        Tuple of (heating, conduction_loss, radiation_loss)
    """
    temperature = np.float64(temperature)
    t_eq = np.float64(config.equilibrium_temperature)
    with np.errstate(over="ignore", invalid="ignore"):
        heating = np.float64(flux) * config.heat_per_flux_unit
        conduction_loss = config.conduction_coeff * (temperature - t_eq)
        radiation_loss = (
            config.emissivity * config.stefan_boltzmann * (temperature**4 - t_eq**4)
        )
    return float(heating), float(conduction_loss), float(radiation_loss)


def _euler_step(temperature: float, flux: float, dt: float, config: ThermalFeedbackConfig):
    """Heat balance terms and temperature change of one explicit Euler step."""
    heating, conduction_loss, radiation_loss = heat_balance(temperature, flux, config)
    with np.errstate(over="ignore", invalid="ignore"):
        delta_temperature = (
            np.float64(dt) * (heating - conduction_loss - radiation_loss) / config.heat_capacity
        )
    return heating, conduction_loss, radiation_loss, float(delta_temperature)


def euler_temperature_increment(
    temperature: float, flux: float, dt: float, config: ThermalFeedbackConfig
) -> float:
    """
    Temperature change over one explicit Euler step, without side effects

    Args:
        temperature: Temperature at the start of the step in K
        flux: Neutron flux (arbitrary units)
        dt: Time step in seconds
        config: Model coefficients

    Returns:
        Temperature change in K
    """
    return _euler_step(temperature, flux, dt, config)[3]


class ThermalFeedbackModel:
    """
    Thermal reactivity feedback model with an instance-owned temperature state

    Each model owns one ReactorThermalState. Pass a state explicitly to share
    it with the caller; otherwise a fresh state at equilibrium is created.
    """

    def __init__(
        self,
        config: Optional[ThermalFeedbackConfig] = None,
        state: Optional[ReactorThermalState] = None,
    ):
        """Initialize the model with its coefficients and temperature state"""
        self.config = config if config is not None else ThermalFeedbackConfig()
        if state is None:
            state = ReactorThermalState.at_equilibrium(self.config)
        self.state = state
        self.last_step: Optional[FeedbackStep] = None

    @property
    def temperature(self) -> float:
        return self.state.temperature

    def reset(self, temperature: Optional[float] = None) -> None:
        """
        Reinitialize the temperature state

        Args:
            temperature: Starting temperature in K (equilibrium if omitted)
        """
        if temperature is None:
            temperature = self.config.equilibrium_temperature
        self.state.temperature = float(temperature)
        self.last_step = None

    def advance(self, flux: float, dt: float) -> FeedbackStep:
        """
        Advance the temperature by one explicit Euler step

        Args:
            flux: Neutron flux (arbitrary units), expected >= 0
            dt: Time step in seconds, expected > 0

        Returns:
            FeedbackStep holding every term of the step
        """
        config = self.config
        heating, conduction_loss, radiation_loss, delta_temperature = _euler_step(
            self.state.temperature, flux, dt, config
        )

        self.state.temperature = self.state.temperature + delta_temperature
        feedback = delta_temperature * config.temperature_coefficient

        step = FeedbackStep(
            flux=flux,
            dt=dt,
            heating=heating,
            conduction_loss=conduction_loss,
            radiation_loss=radiation_loss,
            delta_temperature=delta_temperature,
            temperature=self.state.temperature,
            feedback=feedback,
        )
        self.last_step = step

        logger.debug(
            f"Feedback step: flux={flux}, dt={dt}, dT={delta_temperature:.6e} K, "
            f"T={self.state.temperature:.6f} K, feedback={feedback:.6e}"
        )
        return step

    def step_feedback(self, flux: float, dt: float) -> float:
        """
        Advance the temperature state and return the reactivity feedback

        Args:
            flux: Neutron flux (arbitrary units)
            dt: Time step in seconds

        Returns:
            Reactivity feedback in Δk/k (not pcm)
        """
        return self.advance(flux, dt).feedback

    def get_temperature_coefficients(self) -> Dict[str, float]:
        """
        Get the model coefficients

        Returns:
            Dictionary with every coefficient of the feedback step
        """
        return self.config.to_dict()

    def set_temperature_coefficients(self, **overrides) -> None:
        """
        Override model coefficients

        The temperature state is left untouched, so changing the equilibrium
        temperature does not move the current temperature.

        Raises:
            ConfigurationError: If a coefficient name is unknown
        """
        try:
            self.config = self.config.replace(**overrides)
        except ConfigurationError:
            logger.warning(f"Rejected coefficient override: {sorted(overrides)}")
            raise

    def get_feedback_summary(self) -> str:
        """
        Generate a formatted summary of the thermal state and last step

        Returns:
            Formatted string with temperature feedback summary
        """
        t_eq = self.config.equilibrium_temperature
        summary = "Thermal Feedback Summary:\n"
        summary += "=" * 40 + "\n"
        summary += f"Temperature: {self.temperature:.3f} K "
        summary += f"(Δ{self.temperature - t_eq:+.3f} K from equilibrium)\n"
        summary += f"Temperature Coefficient: {self.config.temperature_coefficient * 1e5:+.2f} pcm/K\n"

        step = self.last_step
        if step is None:
            summary += "No feedback step taken yet\n"
            return summary

        summary += "-" * 40 + "\n"
        summary += f"Heating: {step.heating:.4e}\n"
        summary += f"Conduction Loss: {step.conduction_loss:.4e}\n"
        summary += f"Radiation Loss: {step.radiation_loss:.4e}\n"
        summary += "-" * 40 + "\n"
        summary += f"Last Step ΔT: {step.delta_temperature:+.4e} K over {step.dt} s\n"
        summary += f"Last Feedback: {step.feedback * 1e5:+.4f} pcm\n"

        return summary
