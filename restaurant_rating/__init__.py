"""
Restaurant rating ledger service.

Restaurant owners register establishments; diners submit one five-dimension
review per restaurant; owners and the administrator verify reviews.
"""
