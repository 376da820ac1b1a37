"""
Generations package - history of completed try-on generations.

Recording a generation debits one unit of quota.
"""
