"""SalaryTax: progressive income tax breakdowns by tax year."""
