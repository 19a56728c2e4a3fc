"""Core packages: the IDL document model and the IDL engine."""
