"""
The `constants` module defines the angular, time and model constants shared by the time conversion, position and event layers.
"""

from jax.numpy import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Full turn in radians.
"""
TWO_PI = 2.0 * PI

# Time Constants

"""
Offset between Julian Date and Modified Julian Date. Units: *days*
"""
JD_MJD_OFFSET = 2400000.5

"""
Julian Date of the J2000.0 epoch (2000-01-01 12:00:00 TT). Units: *days*
"""
JD_J2000 = 2451545.0

"""
Julian Date of the J1900.0 epoch (1900-01-00 12:00:00 TT, i.e. 1899-12-31 noon).
Day offsets fed to the position model count from here. Units: *days*
"""
JD_J1900 = 2415020.0

"""
Seconds in a day. Units: *s*
"""
SECONDS_PER_DAY = 86400.0

"""
Days in a Julian year. Units: *days*
"""
DAYS_PER_JULIAN_YEAR = 365.25

# Altitude thresholds

"""
Apparent sunrise/sunset altitude: 34' of horizon refraction plus the 16'
solar semi-diameter. Units: *deg*
"""
SUNRISE_ALTITUDE_DEG = -0.833

"""
Civil twilight boundary. Units: *deg*
"""
CIVIL_TWILIGHT_DEG = -6.0

"""
Nautical twilight boundary. Units: *deg*
"""
NAUTICAL_TWILIGHT_DEG = -12.0

"""
Astronomical twilight boundary. Units: *deg*
"""
ASTRONOMICAL_TWILIGHT_DEG = -18.0

"""
Apparent moonrise/moonset altitude for the geocentric model: mean
horizontal parallax (0.95 deg) less refraction and lunar semi-diameter.
Units: *deg*

References:

1. J. Meeus, *Astronomical Algorithms (2nd Ed.)*, 1998, ch. 15.
"""
MOONRISE_ALTITUDE_DEG = 0.125

"""
Golden hour band, lower and upper edge. Units: *deg*
"""
GOLDEN_HOUR_BAND_DEG = (-4.0, 6.0)

"""
Blue hour band, lower and upper edge. Units: *deg*
"""
BLUE_HOUR_BAND_DEG = (-6.0, -4.0)
