"""
Licensing service port (interface).

Contract for the remote licensing service the manager talks to.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict


class LicensingServicePort(ABC):
    """
    Remote licensing authority.

    Every method returns the decoded JSON body of a successful (200)
    response and raises a PLSClientError subclass otherwise.
    """

    @abstractmethod
    def activate(self, license_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Activate a license for a site.

        Args:
            license_id: License to activate
            payload: Request body, at least domain_name and email

        Returns:
            Decoded response, expected to hold data.activation_key

        Raises:
            RemoteFailureError: Non-200 response
            TransportError: No response obtained
        """
        pass

    @abstractmethod
    def deactivate(self, license_id: str, activation_key: str) -> Dict[str, Any]:
        """
        Deactivate one activation of a license.

        Args:
            license_id: License owning the activation
            activation_key: Activation to release

        Returns:
            Decoded response

        Raises:
            RemoteFailureError: Non-200 response
            TransportError: No response obtained
        """
        pass

    @abstractmethod
    def status(self, activation_key: str) -> Dict[str, Any]:
        """
        Fetch the validity of an activation.

        Args:
            activation_key: Activation to check

        Returns:
            Decoded response, expected to hold data.valid

        Raises:
            RemoteFailureError: Non-200 response
            TransportError: No response obtained
        """
        pass
