"""
Service layer: business rules layered over the repositories.

- entities: the generic create/read/update/delete facade and its policy hook
- provinces: province policy, service and the country context resolver
- styles: style policy and service
"""
