"""
Tests Module: Unit and Integration Tests

Test Coverage:
    - Core types, errors and configuration
    - Hyperplane classification and tree building
    - Candidate search and the concurrent candidate set
    - Forest build / query contracts and recall
    - Structured logging
"""
