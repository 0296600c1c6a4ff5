import logging
import numbers

import numpy as np

logger = logging.getLogger(__name__)

# =========================
# Hodgkin–Huxley constants
# =========================
C_m = 1.0       # membrane capacitance (uF/cm^2)
g_Na = 120.0    # max sodium conductance (mS/cm^2)
g_K  = 36.0     # max potassium conductance (mS/cm^2)
g_L  = 0.3      # leak conductance (mS/cm^2)

E_Na = 50.0     # sodium reversal potential (mV)
E_K  = -77.0    # potassium reversal potential (mV)
E_L  = -54.387  # leak reversal potential (mV)

# Initial conditions
V0 = -65.0
m0 = 0.05
h0 = 0.6
n0 = 0.32

# Injection square wave
PHASE_CONSTANT = 3
I_INJECTION = 30.0

SERIES = (
    "voltage",
    "sodium_current",
    "potassium_current",
    "leak_current",
    "injection_current",
    "m_gate",
    "h_gate",
    "n_gate",
)


class ConfigurationError(ValueError):
    """Raised when a simulator is built or run with invalid settings."""


class NumericDegeneracyError(ArithmeticError):
    """Raised by :meth:`Simulator.check_finite` when a trajectory went non-finite."""

    def __init__(self, step, series):
        self.step = step
        self.series = series
        super().__init__(
            f"non-finite sample at step {step} in {', '.join(series)}"
        )


def check_dt(dt):
    """Return ``dt`` as a float, or raise ConfigurationError unless it is positive and finite."""
    if isinstance(dt, bool) or not isinstance(dt, numbers.Real) \
            or not np.isfinite(dt) or dt <= 0:
        raise ConfigurationError(f"dt must be a positive finite number, got {dt!r}")
    return float(dt)

def check_step_count(step_count):
    """Return ``step_count`` as an int, or raise ConfigurationError unless it is a non-negative integer."""
    if isinstance(step_count, bool):
        ok = False
    elif isinstance(step_count, numbers.Integral):
        ok = step_count >= 0
    elif isinstance(step_count, numbers.Real):
        ok = bool(np.isfinite(step_count)) and float(step_count).is_integer() and step_count >= 0
    else:
        ok = False
    if not ok:
        raise ConfigurationError(
            f"step_count must be a non-negative integer, got {step_count!r}"
        )
    return int(step_count)


# =========================
# Gating variable rate functions
# =========================
# alpha_m and alpha_n are 0/0 at V = -40 and V = -55; the result is NaN.
def alpha_m(V):
    return 0.1 * (-40.0 - V) / (np.exp((-40.0 - V) / 10.0) - 1.0)

def beta_m(V):
    return 4.0 * np.exp((-V - 65.0) / 18.0)

def alpha_h(V):
    return 0.07 * np.exp((-V - 65.0) / 20.0)

def beta_h(V):
    return 1.0 / (np.exp((-35.0 - V) / 10.0) + 1.0)

def alpha_n(V):
    return 0.01 * (-55.0 - V) / (np.exp((-55.0 - V) / 10.0) - 1.0)

def beta_n(V):
    return 0.125 * np.exp((-65.0 - V) / 80.0)

def gate_derivative(alpha, beta, gate):
    return alpha * (1.0 - gate) - beta * gate

# =========================
# Ionic currents
# =========================
def I_Na(V, m, h, corrected=False):
    """
    Sodium current.

    The reference model subtracts E_Na from the whole product,
    g_Na * m³ * h * V - E_Na, instead of using the driving force (V - E_Na).
    That form is the default; ``corrected=True`` gives the textbook current.
    """
    if corrected:
        return g_Na * m**3 * h * (V - E_Na)
    return g_Na * m**3 * h * V - E_Na

def I_K(V, n):
    return g_K * n**4 * (V - E_K)

def I_L(V):
    return g_L * (V - E_L)

def injection(dt, step):
    """
    Square-wave stimulus: I_INJECTION while sin(dt * step * (PHASE_CONSTANT + 1) / 5)
    is non-negative, zero otherwise.
    """
    y = np.sin(dt * (step * (PHASE_CONSTANT + 1)) / 5.0)
    return I_INJECTION if y >= 0.0 else 0.0


# =========================
# Simulator
# =========================
class Simulator:
    """
    Single Hodgkin–Huxley neuron integrated with forward Euler.

    Every quantity is stored as a sample per step. The membrane update at
    step i uses the currents stored at index i, and the currents stored at
    index i + 1 are computed from the voltage and gates at index i, so each
    sample depends only on the previous index.

    Storage is preallocated for ``step_count + 1`` samples. The public series
    (``voltage``, ``m_gate``, ...) are read-only views of the filled part and
    all have length ``current_step + 1``.

    Parameters:
        dt               : integration time step
        step_count       : number of steps :meth:`run` executes by default
        corrected_sodium : use g_Na*m³*h*(V - E_Na) instead of the reference form
        V_init, m_init, h_init, n_init : initial conditions
    """

    def __init__(self, dt=0.001, step_count=200000, corrected_sodium=False,
                 V_init=V0, m_init=m0, h_init=h0, n_init=n0):
        self.dt = check_dt(dt)
        self.step_count = check_step_count(step_count)
        self.corrected_sodium = bool(corrected_sodium)
        self.current_step = 0

        size = self.step_count + 1
        self._data = {name: np.zeros(size) for name in SERIES}
        self._data["voltage"][0] = V_init
        self._data["m_gate"][0] = m_init
        self._data["h_gate"][0] = h_init
        self._data["n_gate"][0] = n_init

    def _view(self, name):
        view = self._data[name][: self.current_step + 1]
        view.flags.writeable = False
        return view

    @property
    def voltage(self):
        return self._view("voltage")

    @property
    def sodium_current(self):
        return self._view("sodium_current")

    @property
    def potassium_current(self):
        return self._view("potassium_current")

    @property
    def leak_current(self):
        return self._view("leak_current")

    @property
    def injection_current(self):
        return self._view("injection_current")

    @property
    def m_gate(self):
        return self._view("m_gate")

    @property
    def h_gate(self):
        return self._view("h_gate")

    @property
    def n_gate(self):
        return self._view("n_gate")

    @property
    def capacity(self):
        """Number of steps that still fit in the preallocated storage."""
        return self.step_count - self.current_step

    def series(self):
        """All eight series keyed by name, in declaration order."""
        return {name: self._view(name) for name in SERIES}

    def step(self):
        """Advance the model by one dt."""
        if self.current_step >= self.step_count:
            raise ConfigurationError(
                f"storage for {self.step_count} steps is exhausted"
            )

        d = self._data
        cur = self.current_step
        nxt = cur + 1
        dt = self.dt

        V = d["voltage"][cur]
        m = d["m_gate"][cur]
        h = d["h_gate"][cur]
        n = d["n_gate"][cur]

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            # C_m * dV/dt = I_inj - I_Na - I_K - I_L, with the stored currents
            dVdt = (d["injection_current"][cur]
                    - d["sodium_current"][cur]
                    - d["potassium_current"][cur]
                    - d["leak_current"][cur]) / C_m
            d["voltage"][nxt] = V + dVdt * dt

            d["m_gate"][nxt] = m + gate_derivative(alpha_m(V), beta_m(V), m) * dt
            d["h_gate"][nxt] = h + gate_derivative(alpha_h(V), beta_h(V), h) * dt
            d["n_gate"][nxt] = n + gate_derivative(alpha_n(V), beta_n(V), n) * dt

            d["injection_current"][nxt] = injection(dt, cur)
            d["sodium_current"][nxt] = I_Na(V, m, h, corrected=self.corrected_sodium)
            d["potassium_current"][nxt] = I_K(V, n)
            d["leak_current"][nxt] = I_L(V)

        self.current_step = nxt

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "step %d: voltage=%g i=(%g, %g, %g) gate=(%g, %g, %g)",
                nxt, d["voltage"][nxt],
                d["sodium_current"][nxt], d["potassium_current"][nxt], d["leak_current"][nxt],
                d["m_gate"][nxt], d["h_gate"][nxt], d["n_gate"][nxt],
            )

    def run(self, step_count=None):
        """
        Execute ``step_count`` steps (default: the configured count).

        Non-finite samples do not stop the loop; they are reported once the
        run is over.
        """
        if step_count is None:
            step_count = self.capacity
        step_count = check_step_count(step_count)
        if step_count > self.capacity:
            raise ConfigurationError(
                f"cannot run {step_count} steps, only {self.capacity} remain"
            )

        logger.info("Running %d steps with dt=%g", step_count, self.dt)
        for _ in range(step_count):
            self.step()

        bad = self.first_non_finite_step()
        if bad is not None:
            logger.warning("Trajectory became non-finite at step %d", bad)
        return self

    def first_non_finite_step(self):
        """Earliest index holding a non-finite sample in any series, or None."""
        first = None
        for name in SERIES:
            idx = np.flatnonzero(~np.isfinite(self._view(name)))
            if idx.size and (first is None or idx[0] < first):
                first = int(idx[0])
        return first

    def check_finite(self):
        """Raise :class:`NumericDegeneracyError` if any sample is non-finite."""
        step = self.first_non_finite_step()
        if step is None:
            return
        names = [name for name in SERIES if not np.isfinite(self._data[name][step])]
        raise NumericDegeneracyError(step, names)
