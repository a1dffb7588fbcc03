"""Consistent Storybook Generator."""
