"""Project package for the SurgiBook marketplace backend."""
