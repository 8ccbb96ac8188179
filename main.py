from stratus import universal_factory



def main():
    # Example usage of the universal factory
    aws_config = {
        "aws_access_key_id": "AKIAEXAMPLE",
        "aws_secret_access_key": "wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY",
        "host": "ec2.us-west-1.amazonaws.com",
    }
    gcp_config = {"project_id": "my-gcp-project"}

    ec2 = universal_factory("compute", "aws", aws_config)
    backend_services = universal_factory("compute", "gcp", gcp_config)

    print(f"EC2: {ec2.client}")
    print(f"Backend services: {backend_services.project_id}")

if __name__ == "__main__":
    main()
