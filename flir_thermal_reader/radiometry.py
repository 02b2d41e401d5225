"""
Raw sensor counts to object temperature.

Planck radiance model with atmospheric and IR-window attenuation, after
Thermimage's raw2temp (https://rdrr.io/cran/Thermimage/src/R/raw2temp.R).
"""

from dataclasses import dataclass
from typing import Union

import numpy as np

from .errors import MissingPropertyError
from .models import ThermalImage


def k2c(k):
    return k - 273.15


def c2k(c):
    return c + 273.15


def c2f(c, diff=False):
    """Celsius to Fahrenheit; diff=True for delta conversion."""
    return c * (9.0 / 5.0) + (0 if diff else 32)


def f2c(f, diff=False):
    """Fahrenheit to Celsius; diff=True for delta conversion."""
    return (f - (0 if diff else 32)) * (5.0 / 9.0)


@dataclass(frozen=True)
class CalibrationParameters:
    """Calibration values as stored in the Camera record (temperatures in Kelvin)."""

    emissivity: float
    object_distance: float
    reflected_temperature: float
    atmospheric_temperature: float
    ir_window_transmission: float
    relative_humidity: float
    planck_r1: float
    planck_b: float
    planck_f: float
    planck_o: float
    planck_r2: float
    atmospheric_alpha1: float
    atmospheric_alpha2: float
    atmospheric_beta1: float
    atmospheric_beta2: float
    atmospheric_x: float

    @classmethod
    def from_image(cls, image: ThermalImage) -> "CalibrationParameters":
        """Collect calibration from decoded Camera properties; MissingPropertyError if any is absent."""
        missing = [key for key in CALIBRATION_PROPERTIES.values() if key not in image.properties]
        if missing:
            raise MissingPropertyError(missing)
        return cls(**{
            attr: float(image.get_property(key)) for attr, key in CALIBRATION_PROPERTIES.items()
        })


# CalibrationParameters field -> Camera property name
CALIBRATION_PROPERTIES = {
    "emissivity": "Emissivity",
    "object_distance": "ObjectDistance",
    "reflected_temperature": "ReflectedApparentTemperature",
    "atmospheric_temperature": "AtmosphericTemperature",
    "ir_window_transmission": "IRWindowTransmission",
    "relative_humidity": "RelativeHumidity",
    "planck_r1": "PlanckR1",
    "planck_b": "PlanckB",
    "planck_f": "PlanckF",
    "planck_o": "PlanckO",
    "planck_r2": "PlanckR2",
    "atmospheric_alpha1": "AtmosphericTransAlpha1",
    "atmospheric_alpha2": "AtmosphericTransAlpha2",
    "atmospheric_beta1": "AtmosphericTransBeta1",
    "atmospheric_beta2": "AtmosphericTransBeta2",
    "atmospheric_x": "AtmosphericTransX",
}


def temperature_to_raw(t_celsius, cal: CalibrationParameters):
    """Planck inverse: raw counts emitted by a blackbody at t_celsius."""
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return cal.planck_r1 / (
            cal.planck_r2 * (np.exp(cal.planck_b / c2k(np.asarray(t_celsius, dtype=np.float64))) - cal.planck_f)
        ) - cal.planck_o


def atmospheric_transmission(cal: CalibrationParameters) -> float:
    """Fraction of radiance surviving the path between object and camera."""
    atm_c = k2c(cal.atmospheric_temperature)
    rh = cal.relative_humidity * 100
    h2o = (rh / 100) * np.exp(
        1.5587 + 0.06939 * atm_c - 0.00027816 * atm_c ** 2 + 0.00000068455 * atm_c ** 3
    )
    root_d = np.sqrt(cal.object_distance / 2)
    return float(
        cal.atmospheric_x * np.exp(-root_d * (cal.atmospheric_alpha1 + cal.atmospheric_beta1 * np.sqrt(h2o)))
        + (1 - cal.atmospheric_x) * np.exp(-root_d * (cal.atmospheric_alpha2 + cal.atmospheric_beta2 * np.sqrt(h2o)))
    )


def raw_to_temperature(raw, cal: CalibrationParameters, fahrenheit: bool = False) -> Union[float, np.ndarray]:
    """
    Convert raw counts to object temperature in Celsius (or Fahrenheit).

    Each sample is independent; samples hitting a non-positive logarithm argument,
    a division by zero or any non-finite intermediate come back as NaN.
    """
    scalar = np.ndim(raw) == 0
    raw = np.asarray(raw, dtype=np.float64)

    E = cal.emissivity
    IRT = cal.ir_window_transmission
    refl_c = k2c(cal.reflected_temperature)
    atm_c = k2c(cal.atmospheric_temperature)
    window_c = refl_c
    emiss_wind = 1 - IRT
    refl_wind = 0

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        tau = atmospheric_transmission(cal)
        raw_refl_attn = (1 - E) / E * temperature_to_raw(refl_c, cal) if E else np.nan
        raw_atm_attn = (1 - tau) / E / tau * temperature_to_raw(atm_c, cal) if E and tau else np.nan
        if E and tau and IRT:
            raw_wind_attn = emiss_wind / E / tau / IRT * temperature_to_raw(window_c, cal)
            raw_refl_win_attn = refl_wind / E / tau / IRT * temperature_to_raw(refl_c, cal)
            raw_atm2_attn = (1 - tau) / E / tau / IRT / tau * temperature_to_raw(atm_c, cal)
            object_raw = (
                raw / E / tau / IRT / tau
                - raw_atm_attn - raw_atm2_attn - raw_wind_attn - raw_refl_attn - raw_refl_win_attn
            )
        else:
            object_raw = np.full(raw.shape, np.nan)

        denominator = cal.planck_r2 * (object_raw + cal.planck_o)
        valid = np.isfinite(object_raw) & (denominator != 0)
        arg = np.where(valid, cal.planck_r1 / np.where(valid, denominator, 1.0) + cal.planck_f, np.nan)
        valid &= np.isfinite(arg) & (arg > 0)
        log_arg = np.log(np.where(valid, arg, 1.0))
        valid &= log_arg != 0
        temp = np.where(valid, cal.planck_b / np.where(valid, log_arg, 1.0) - 273.15, np.nan)
        temp = np.where(np.isfinite(temp), temp, np.nan)

    if fahrenheit:
        temp = c2f(temp)
    return float(temp) if scalar else temp
