# Services package init
"""
Tareas Backend: Services Layer
==============================

What:  Business logic between routes (HTTP) and the external platforms.

Service Inventory:
    - IdentityProvider (abstract): contract with the identity service
    - SupabaseIdentityProvider: Supabase Auth implementation
    - AccessGate: credential extraction + validation shared by all guards
    - TaskStore (abstract) / SqlTaskStore: owner-scoped task persistence
    - TaskService: list / create / delete rules for tasks
    - AuthService: register / login / logout rules
"""
