"""BlockGenesis - Command Line Interface"""
