import pytest
import json

from sniprewards.models import AuthUser, Profile


@pytest.mark.auth
class TestAuthSignup:
    """Test suite for user signup functionality."""

    def test_signup_success(self, client, test_user_data):
        """Test successful user signup."""
        response = client.post(
            '/api/auth/signup',
            data=json.dumps(test_user_data),
            content_type='application/json'
        )
        if response.status_code != 201:
            print(f"\nDEBUG ERROR: {response.data}")

        assert response.status_code == 201
        data = json.loads(response.data)
        assert data['status'] == 'success'
        assert data['user']['email'] == test_user_data['email']
        assert data['user']['role'] == 'customer'
        assert 'password_hash' not in data['user']

    def test_signup_creates_profile_with_same_id(self, client, db, test_user_data):
        """Profile id is the identity provider's user id."""
        response = client.post(
            '/api/auth/signup',
            data=json.dumps(test_user_data),
            content_type='application/json'
        )
        user_id = json.loads(response.data)['user']['id']

        assert db.session.get(AuthUser, user_id) is not None
        assert db.session.get(Profile, user_id).email == test_user_data['email']

    def test_signup_defaults_role_to_customer(self, client, test_user_data):
        test_user_data.pop('role')
        response = client.post(
            '/api/auth/signup',
            data=json.dumps(test_user_data),
            content_type='application/json'
        )

        assert response.status_code == 201
        assert json.loads(response.data)['user']['role'] == 'customer'

    def test_signup_salon_owner(self, client, test_user_data):
        test_user_data['role'] = 'salon_owner'
        response = client.post(
            '/api/auth/signup',
            data=json.dumps(test_user_data),
            content_type='application/json'
        )

        assert response.status_code == 201
        assert json.loads(response.data)['user']['role'] == 'salon_owner'

    def test_signup_invalid_role(self, client, test_user_data):
        test_user_data['role'] = 'admin'
        response = client.post(
            '/api/auth/signup',
            data=json.dumps(test_user_data),
            content_type='application/json'
        )

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data['status'] == 'error'

    def test_signup_missing_email(self, client, test_user_data):
        """Test signup with missing email."""
        test_user_data.pop('email')
        response = client.post(
            '/api/auth/signup',
            data=json.dumps(test_user_data),
            content_type='application/json'
        )

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data['status'] == 'error'

    def test_signup_missing_password(self, client, test_user_data):
        """Test signup with missing password."""
        test_user_data.pop('password')
        response = client.post(
            '/api/auth/signup',
            data=json.dumps(test_user_data),
            content_type='application/json'
        )

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data['status'] == 'error'

    def test_signup_duplicate_email(self, client, test_user_data):
        """Test signup with duplicate email."""
        client.post(
            '/api/auth/signup',
            data=json.dumps(test_user_data),
            content_type='application/json'
        )

        test_user_data['email'] = test_user_data['email'].upper()
        response = client.post(
            '/api/auth/signup',
            data=json.dumps(test_user_data),
            content_type='application/json'
        )

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data['message'] == 'Email already exists'


@pytest.mark.auth
class TestAuthLogin:
    """Test suite for user login functionality."""

    def test_login_success(self, client, sample_customer):
        """Test successful login."""
        response = client.post(
            '/api/auth/login',
            data=json.dumps({'email': 'customer@example.com', 'password': 'password123'}),
            content_type='application/json'
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'success'
        assert data['token']
        assert data['user']['id'] == sample_customer.id

    def test_login_wrong_password(self, client, sample_customer):
        """Test login with incorrect password."""
        response = client.post(
            '/api/auth/login',
            data=json.dumps({'email': 'customer@example.com', 'password': 'wrong'}),
            content_type='application/json'
        )

        assert response.status_code == 401
        data = json.loads(response.data)
        assert data['status'] == 'error'

    def test_login_unknown_email(self, client, db):
        response = client.post(
            '/api/auth/login',
            data=json.dumps({'email': 'ghost@example.com', 'password': 'password123'}),
            content_type='application/json'
        )

        assert response.status_code == 401

    def test_login_missing_fields(self, client, db):
        """Test login with missing credentials."""
        response = client.post(
            '/api/auth/login',
            data=json.dumps({'email': 'customer@example.com'}),
            content_type='application/json'
        )

        assert response.status_code == 400

    def test_signup_then_login(self, client, test_user_data):
        client.post(
            '/api/auth/signup',
            data=json.dumps(test_user_data),
            content_type='application/json'
        )
        response = client.post(
            '/api/auth/login',
            data=json.dumps({
                'email': test_user_data['email'],
                'password': test_user_data['password'],
            }),
            content_type='application/json'
        )

        assert response.status_code == 200


@pytest.mark.auth
class TestCurrentUser:
    """Test suite for the token-protected profile endpoint."""

    def test_me_with_token(self, client, sample_customer, customer_headers):
        response = client.get('/api/auth/me', headers=customer_headers)

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['id'] == sample_customer.id
        assert data['role'] == 'customer'

    def test_me_with_login_token(self, client, sample_owner):
        login = client.post(
            '/api/auth/login',
            data=json.dumps({'email': 'owner@example.com', 'password': 'password123'}),
            content_type='application/json'
        )
        token = json.loads(login.data)['token']

        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 200
        assert json.loads(response.data)['role'] == 'salon_owner'

    def test_me_without_token(self, client, db):
        response = client.get('/api/auth/me')

        assert response.status_code == 401
        data = json.loads(response.data)
        assert data['status'] == 'error'
        assert data['code'] == 'UNAUTHORIZED'

    def test_me_with_garbage_token(self, client, db):
        response = client.get('/api/auth/me', headers={'Authorization': 'Bearer abc.def.ghi'})

        assert response.status_code == 401
        assert json.loads(response.data)['code'] == 'INVALID_TOKEN'
