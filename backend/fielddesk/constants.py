"""Fixed lookup tables shared by forms, filters, and the dashboard."""

STATES: tuple[str, ...] = (
    "Andhra Pradesh",
    "Arunachal Pradesh",
    "Assam",
    "Bihar",
    "Chhattisgarh",
    "Goa",
    "Gujarat",
    "Haryana",
    "Himachal Pradesh",
    "Jharkhand",
    "Karnataka",
    "Kerala",
    "Madhya Pradesh",
    "Maharashtra",
    "Manipur",
    "Meghalaya",
    "Mizoram",
    "Nagaland",
    "Odisha",
    "Punjab",
    "Rajasthan",
    "Sikkim",
    "Tamil Nadu",
    "Telangana",
    "Tripura",
    "Uttar Pradesh",
    "Uttarakhand",
    "West Bengal",
    "Andaman and Nicobar Islands",
    "Chandigarh",
    "Dadra and Nagar Haveli and Daman and Diu",
    "Delhi",
    "Jammu and Kashmir",
    "Ladakh",
    "Lakshadweep",
    "Puducherry",
)

# Inspection report payment states
PAYMENT_STATUSES: tuple[str, ...] = ("Pending", "Paid", "Overdue")

# Payout report payment states
PAYOUT_STATUSES: tuple[str, ...] = ("Pending", "Paid", "Processing")

DEFAULT_INVOICE_STATUS = "Pending"

# Dashboard region buckets
REGION_UNKNOWN = "Unknown"
REGION_NO_DATA = "No Data"
