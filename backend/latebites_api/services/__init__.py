"""
Application services.

- domain: reservations, identity, onboarding, customer account
- catalog: catalog queries
- location: device location
- auth: auth provider client
- email: verification e-mails
"""
