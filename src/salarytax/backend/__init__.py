"""Backend services for the SalaryTax calculator."""
