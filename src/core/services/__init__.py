"""Services that orchestrate adapters into the build flow."""
