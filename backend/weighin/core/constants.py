"""
Application Constants
Defines constant values used throughout the application.

This module contains all application-wide constants including:
- Group membership roles
- Unit conversion factors
- BMI category thresholds and calorie formula constants
- Invite code and team settings
- Notification types and milestone thresholds
"""

# Group Membership Roles
ROLE_OWNER = "OWNER"  # Group creator, manages teams and settings
ROLE_MEMBER = "MEMBER"  # Regular member, logs weight and views progress

VALID_ROLES = [ROLE_OWNER, ROLE_MEMBER]

# Units
UNIT_POUND = "lb"
UNIT_KILOGRAM = "kg"
UNIT_CENTIMETER = "cm"
UNIT_FEET = "ft"

WEIGHT_UNITS = [UNIT_POUND, UNIT_KILOGRAM]
HEIGHT_UNITS = [UNIT_CENTIMETER, UNIT_FEET]

# Conversion factors
LBS_PER_KG = 2.20462  # 1 kg = 2.20462 lbs (canonical weight unit is pounds)
CM_PER_INCH = 2.54  # 1 inch = 2.54 cm (canonical height unit is centimeters)
INCHES_PER_FOOT = 12

# BMI category upper bounds (exclusive), checked in order
BMI_UNDERWEIGHT = "Underweight"
BMI_NORMAL = "Normal"
BMI_OVERWEIGHT = "Overweight"
BMI_OBESE = "Obese"
BMI_SEVERELY_OBESE = "Severely Obese"

BMI_CATEGORIES = [
    (18.5, BMI_UNDERWEIGHT),
    (25.0, BMI_NORMAL),
    (30.0, BMI_OVERWEIGHT),
    (35.0, BMI_OBESE),
]

BMI_TREND_THRESHOLD = 0.1  # |delta BMI| below this is "stable"

# Mifflin-St Jeor daily calorie estimate
ACTIVITY_FACTOR = 1.4  # Sedentary to lightly active
DEFAULT_AGE = 30
SEX_MALE = "male"
SEX_FEMALE = "female"
DEFAULT_SEX = SEX_MALE
WEIGHT_LOSS_CALORIE_FACTOR = 0.85  # -15% of maintenance
WEIGHT_GAIN_CALORIE_FACTOR = 1.15  # +15% of maintenance

# Invite Code Settings
INVITE_CODE_LENGTH = 6  # Length of group invite codes (A-Z, 0-9)

# Predefined color palette for teams
TEAM_COLORS = [
    "#EF4444",  # Red
    "#3B82F6",  # Blue
    "#10B981",  # Green
    "#F59E0B",  # Amber
    "#8B5CF6",  # Purple
    "#EC4899",  # Pink
    "#14B8A6",  # Teal
    "#F97316",  # Orange
    "#06B6D4",  # Cyan
    "#84CC16",  # Lime
]

# Reminders
REMINDER_TYPE_WEIGHT_LOGGING = "weight_logging"
NEVER_LOGGED_DAYS = 999  # days_since_last_entry reported for users without entries

# Notification Types
NOTIFICATION_MEMBER_JOINED = "member_joined"
NOTIFICATION_MEMBER_LEFT = "member_left"
NOTIFICATION_WEIGHT_ENTRY = "weight_entry"
NOTIFICATION_MILESTONE = "milestone"

# Milestones (percentage change thresholds, highest tier first)
MILESTONES = [
    (-15.0, "15_percent_loss", "Outstanding Achievement!",
     "Phenomenal! You've lost 15% or more of your starting weight!"),
    (-10.0, "10_percent_loss", "Amazing Progress!",
     "Incredible! You've lost 10% of your starting weight!"),
    (-5.0, "5_percent_loss", "Milestone Achieved!",
     "Congratulations! You've lost 5% of your starting weight!"),
]

# Pagination
DEFAULT_PAGE_SIZE = 50  # Default number of items per page
MAX_PAGE_SIZE = 500  # Maximum items per page
