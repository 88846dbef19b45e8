"""craftvm - power a Minecraft server VM on Azure up and down safely

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- The server's own liveness decides whether work is needed
- Fail fast, never mutate on doubt

The craftvm CLI starts and deallocates the Azure VM hosting a Minecraft
server, refusing transitions that are redundant or that would hide drift
between the VM and the server process.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
