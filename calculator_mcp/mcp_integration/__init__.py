"""
MCP (Model Context Protocol) integration module.
"""
from .server import CalculatorProtocol, create_calculator_server

__all__ = ['CalculatorProtocol', 'create_calculator_server']
